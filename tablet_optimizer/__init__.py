"""
Tablet Optimizer - Ranks tablet rearrangements by entrance distance.
"""

__version__ = "0.1.0"
