"""
Snapshot Module - Build tablets from external sources.

Two sources are supported:
  - Tiles reported by the game client: (x, y, room_id) triples
  - Text layouts, one character per cell:

        .  Empty
        ~  Water
        E  Entrance
        X  Encounter

    The first line is the top row (highest y), the same way the
    simulator window draws the tablet.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from tablet_optimizer.solver import CellType, Coordinate, TabletState, InvalidTabletError

logger = logging.getLogger(__name__)

# Room ids as reported by the game; any other id is an encounter room
CELL_TYPE_BY_ROOM_ID: Dict[str, CellType] = {
    "NULL": CellType.WATER,
    "ENTRANCE": CellType.ENTRANCE,
    "Empty": CellType.EMPTY,
}

CELL_TYPE_BY_CHAR: Dict[str, CellType] = {
    ".": CellType.EMPTY,
    "~": CellType.WATER,
    "E": CellType.ENTRANCE,
    "X": CellType.ENCOUNTER,
}
CHAR_BY_CELL_TYPE: Dict[CellType, str] = {v: k for k, v in CELL_TYPE_BY_CHAR.items()}


def cell_type_for_room(room_id: str) -> CellType:
    return CELL_TYPE_BY_ROOM_ID.get(room_id, CellType.ENCOUNTER)


def tablet_from_tiles(tiles: Iterable[Tuple[int, int, str]]) -> TabletState:
    """
    Create a tablet from game tiles.

    The tablet spans (max x + 1) by (max y + 1); positions with no
    reported tile are treated as Water.

    Args:
        tiles: (x, y, room_id) triples

    Returns:
        TabletState instance

    Raises:
        InvalidTabletError: If no tiles were given or there is no entrance
    """
    tiles = list(tiles)
    if not tiles:
        raise InvalidTabletError("Your tablet does not contain any tiles (or is not loaded properly)")

    max_x = max(x for x, _, _ in tiles)
    max_y = max(y for _, y, _ in tiles)
    columns = [[CellType.WATER] * (max_y + 1) for _ in range(max_x + 1)]
    for x, y, room_id in tiles:
        if x < 0 or y < 0:
            raise InvalidTabletError(f"Tile ({x},{y}) has a negative coordinate")
        columns[x][y] = cell_type_for_room(room_id)

    logger.debug(f"Loaded {len(tiles)} tiles into {max_x + 1}x{max_y + 1} tablet")
    return TabletState.from_columns(columns)


def parse_layout(text: str) -> TabletState:
    """
    Create a tablet from a text layout.

    Blank lines and surrounding whitespace are ignored.

    Args:
        text: Layout text, top row first

    Returns:
        TabletState instance

    Raises:
        InvalidTabletError: On unknown characters, ragged rows or no entrance
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise InvalidTabletError("Layout is empty")

    rows: List[List[CellType]] = []
    for line_no, line in enumerate(lines, start=1):
        row = []
        for char in line:
            if char not in CELL_TYPE_BY_CHAR:
                raise InvalidTabletError(
                    f"Unknown cell '{char}' on line {line_no}, "
                    f"expected one of {''.join(CELL_TYPE_BY_CHAR)}"
                )
            row.append(CELL_TYPE_BY_CHAR[char])
        rows.append(row)

    # Text lists the top row first; rows[0] must be y = 0
    rows.reverse()
    return TabletState.from_rows(rows)


def load_layout(path: Union[str, Path]) -> TabletState:
    """
    Read a text layout file.

    Args:
        path: Layout file path

    Returns:
        TabletState instance

    Raises:
        OSError: If the file cannot be read
        InvalidTabletError: If the layout is invalid
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()
    logger.info(f"Loading layout from {path}")
    return parse_layout(text)


def format_layout(state: TabletState) -> str:
    """
    Render a tablet in the text layout format.

    Args:
        state: Tablet to render

    Returns:
        Layout text, top row first, one trailing newline
    """
    lines = []
    for y in range(state.height - 1, -1, -1):
        lines.append("".join(
            CHAR_BY_CELL_TYPE[state.at(Coordinate(x, y)).type]
            for x in range(state.width)
        ))
    return "\n".join(lines) + "\n"


def sample_tablet() -> TabletState:
    """
    Manual-override tablet used when no game data is available.

    Returns:
        Single-column tablet [Encounter, Entrance, Empty]
    """
    return TabletState.from_columns([[CellType.ENCOUNTER, CellType.ENTRANCE, CellType.EMPTY]])
