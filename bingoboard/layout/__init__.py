"""
Layout Module

Grid geometry: index mapping, pivots, spacing and hit testing.
"""

from bingoboard.layout.grid import Grid, GridSlot, Padding

__all__ = ["Grid", "GridSlot", "Padding"]
