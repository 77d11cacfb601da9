"""
Grid Layout

Positions items in a rectangular grid of fixed-size cells.

The grid owns the position of every item it holds. Items are stored as slots
(payload + position) in insertion order, and the insertion order is the item's
index. By default any change that affects geometry (columns, rows, cell size,
spacing, padding, position, pivots) immediately recomputes every slot's
position. Set ``automatic_reposition`` to False to batch changes, then call
``recompute_all_positions`` once done.
"""

import logging
import math
import typing as t
from dataclasses import dataclass, field

import numpy as np

from bingoboard.common.constants import INVALID_INDEX
from bingoboard.common.enums import GridPivot
from bingoboard.common.utils import VectorLike, pivot_factors, pivot_offset, rect_contains, vec2

logger = logging.getLogger(__name__)

T = t.TypeVar("T")

Rect = t.Tuple[int, int, int, int]
FloatRect = t.Tuple[float, float, float, float]


@dataclass
class Padding:
    """Padding applied to every cell of the grid."""

    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0

    @property
    def total(self) -> np.ndarray:
        """The padding folded into a single translation."""
        return np.array([self.right - self.left, self.bottom - self.top], dtype=float)


@dataclass
class GridSlot(t.Generic[T]):
    """A payload held by the grid together with its computed position."""

    payload: T
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))


class Grid(t.Generic[T]):
    """
    A grid holding positioned items.

    Row-major indexing is used when ``constrain_by_column`` is True
    (index = row * columns + column), column-major otherwise.
    """

    def __init__(
        self,
        columns: int,
        rows: int,
        cell_size: VectorLike,
        position: VectorLike = (0.0, 0.0),
        spacing: VectorLike = (0.0, 0.0),
        padding: t.Optional[Padding] = None,
        grid_pivot: GridPivot = GridPivot.UPPER_LEFT,
        element_pivot: GridPivot = GridPivot.UPPER_LEFT,
        constrain_by_column: bool = True,
        automatic_reposition: bool = True,
    ):
        # There are no items yet, so the fields are set directly
        self._columns = int(columns)
        self._rows = int(rows)
        self._cell_size = vec2(cell_size)
        self._position = vec2(position)
        self._spacing = vec2(spacing)
        self._padding = Padding(**vars(padding)) if padding else Padding()
        self._grid_pivot = grid_pivot
        self._element_pivot = element_pivot
        self._constrain_by_column = constrain_by_column

        self.automatic_reposition = automatic_reposition

        self._slots: t.List[GridSlot[T]] = []

        if self._columns <= 0 or self._rows <= 0:
            logger.warning(
                f"Grid created with {self._columns} columns and {self._rows} rows; "
                "both should be greater than 0"
            )

    # ============================================================================
    # PROPERTIES
    # ============================================================================

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cell_size(self) -> np.ndarray:
        return self._cell_size.copy()

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def spacing(self) -> np.ndarray:
        return self._spacing.copy()

    @property
    def padding(self) -> Padding:
        return Padding(**vars(self._padding))

    @property
    def grid_pivot(self) -> GridPivot:
        return self._grid_pivot

    @property
    def element_pivot(self) -> GridPivot:
        return self._element_pivot

    @property
    def constrain_by_column(self) -> bool:
        return self._constrain_by_column

    @property
    def max_elements_in_grid(self) -> int:
        """The number of items the grid can hold based on its size."""
        return self._columns * self._rows

    @property
    def num_elements_in_grid(self) -> int:
        return len(self._slots)

    @property
    def grid_size(self) -> np.ndarray:
        """The total size of the grid, not taking the pivot into account."""
        return np.array(
            [self._columns * self._cell_size[0], self._rows * self._cell_size[1]],
            dtype=float,
        )

    @property
    def grid_bounds(self) -> Rect:
        """The bounds of the grid at its position, not taking the pivot into account."""
        width, height = self.grid_size
        return (
            math.floor(self._position[0]),
            math.floor(self._position[1]),
            int(width),
            int(height),
        )

    @property
    def items(self) -> t.List[T]:
        """The payloads in index order."""
        return [slot.payload for slot in self._slots]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> t.Iterator[T]:
        return iter(self.items)

    # ============================================================================
    # SETTERS
    # ============================================================================

    def _on_geometry_changed(self, changed: bool) -> None:
        """Reposition the items after a setter, if anything actually changed."""
        if changed and self.automatic_reposition:
            self.recompute_all_positions()

    def set_columns(self, columns: int) -> None:
        columns = int(columns)
        if columns <= 0:
            logger.warning(f"Columns set to {columns}, which is less than or equal to 0")
        changed = columns != self._columns
        self._columns = columns
        self._on_geometry_changed(changed)

    def set_rows(self, rows: int) -> None:
        rows = int(rows)
        if rows <= 0:
            logger.warning(f"Rows set to {rows}, which is less than or equal to 0")
        changed = rows != self._rows
        self._rows = rows
        self._on_geometry_changed(changed)

    def set_cell_size(self, cell_size: VectorLike) -> None:
        cell_size = vec2(cell_size)
        changed = not np.array_equal(cell_size, self._cell_size)
        self._cell_size = cell_size
        self._on_geometry_changed(changed)

    def set_spacing(self, spacing: VectorLike) -> None:
        spacing = vec2(spacing)
        changed = not np.array_equal(spacing, self._spacing)
        self._spacing = spacing
        self._on_geometry_changed(changed)

    def set_position(self, position: VectorLike) -> None:
        position = vec2(position)
        changed = not np.array_equal(position, self._position)
        self._position = position
        self._on_geometry_changed(changed)

    def set_padding(self, left: int, right: int, top: int, bottom: int) -> None:
        padding = Padding(left, right, top, bottom)
        changed = padding != self._padding
        self._padding = padding
        self._on_geometry_changed(changed)

    def set_padding_relative(self, left: int, right: int, top: int, bottom: int) -> None:
        """Change the padding by the given amounts on each side."""
        current = self._padding
        self.set_padding(
            current.left + left,
            current.right + right,
            current.top + top,
            current.bottom + bottom,
        )

    def set_grid_pivot(self, pivot: GridPivot) -> None:
        changed = pivot != self._grid_pivot
        self._grid_pivot = pivot
        self._on_geometry_changed(changed)

    def set_element_pivot(self, pivot: GridPivot) -> None:
        changed = pivot != self._element_pivot
        self._element_pivot = pivot
        self._on_geometry_changed(changed)

    def set_constrain_by_column(self, constrain_by_column: bool) -> None:
        changed = constrain_by_column != self._constrain_by_column
        self._constrain_by_column = constrain_by_column
        self._on_geometry_changed(changed)

    # ============================================================================
    # ITEMS
    # ============================================================================

    def add_item(self, item: t.Optional[T]) -> None:
        """Append an item to the grid.

        Items beyond the grid's capacity are still accepted, with a warning.
        """
        if item is None:
            logger.warning("Attempted to add a None item to the grid")
            return

        self._slots.append(GridSlot(item))

        if self.num_elements_in_grid > self.max_elements_in_grid:
            logger.warning(
                f"The grid has {self.num_elements_in_grid} items which exceeds the max of "
                f"{self.max_elements_in_grid}. Adjust the columns and rows when expanding the grid."
            )

        if self.automatic_reposition:
            self.recompute_all_positions()

    def remove_item(self, item: T) -> bool:
        """Remove the slot holding this exact item. Returns True if one was removed."""
        for index, slot in enumerate(self._slots):
            if slot.payload is item:
                return self.remove_item_at(index)
        return False

    def remove_item_at(self, index: int) -> bool:
        """Remove the item at an index. Returns True if one was removed."""
        if index < 0 or index >= len(self._slots):
            return False

        del self._slots[index]
        if self.automatic_reposition:
            self.recompute_all_positions()
        return True

    def remove_item_at_column_row(self, column: int, row: int) -> bool:
        return self.remove_item_at(self.index_from_column_row(column, row))

    def clear(self) -> None:
        """Remove every item from the grid."""
        self._slots.clear()

    def get_item(self, index: int) -> t.Optional[T]:
        """Get the item at an index, or None if the index is out of range."""
        if index < 0 or index >= len(self._slots):
            logger.warning(f"Index {index} is out of the grid's range")
            return None
        return self._slots[index].payload

    def get_item_at(self, column: int, row: int) -> t.Optional[T]:
        return self.get_item(self.index_from_column_row(column, row))

    def get_position(self, index: int) -> t.Optional[np.ndarray]:
        """Get the stored position of the item at an index."""
        if index < 0 or index >= len(self._slots):
            return None
        return self._slots[index].position.copy()

    def recompute_all_positions(self) -> None:
        """Assign every item the position for its index."""
        for index, slot in enumerate(self._slots):
            slot.position = self.position_at_index(index)

    # ============================================================================
    # INDEXING
    # ============================================================================

    def in_bounds(self, column: int, row: int) -> bool:
        """Check whether a zero-based column and row lie inside the grid."""
        return 0 <= column < self._columns and 0 <= row < self._rows

    def index_from_column_row(self, column: int, row: int) -> int:
        """Get the index for a zero-based column and row.

        Returns:
            The index, or INVALID_INDEX if the column or row is out of range
        """
        if not self.in_bounds(column, row):
            logger.warning(f"Column {column} or row {row} is out of the grid's range")
            return INVALID_INDEX

        if self._constrain_by_column:
            return row * self._columns + column
        return column * self._rows + row

    def column_row_from_index(self, index: int) -> t.Tuple[int, int]:
        """Get the zero-based column and row for an index.

        The index may be outside the current number of items.

        Returns:
            (column, row), or (INVALID_INDEX, INVALID_INDEX) if the grid
            has no extent along the axis that is filled first
        """
        if self._constrain_by_column:
            if self._columns <= 0:
                logger.warning(f"Grid columns is {self._columns}, which is less than or equal to 0")
                return INVALID_INDEX, INVALID_INDEX
            row, column = divmod(index, self._columns)
            return column, row

        if self._rows <= 0:
            logger.warning(f"Grid rows is {self._rows}, which is less than or equal to 0")
            return INVALID_INDEX, INVALID_INDEX
        column, row = divmod(index, self._rows)
        return column, row

    # ============================================================================
    # GEOMETRY
    # ============================================================================

    def position_at_index(
        self,
        index: int,
        grid_pivot: t.Optional[GridPivot] = None,
        element_pivot: t.Optional[GridPivot] = None,
    ) -> np.ndarray:
        """Get the position an item at an index would be drawn at.

        The index can be outside of the current number of items, which is
        useful to preview the layout of a grid before it is filled.

        Args:
            index: Index of the item
            grid_pivot: Pivot of the whole grid, defaults to the grid's own
            element_pivot: Pivot within each cell, defaults to the grid's own
        """
        grid_pivot = self._grid_pivot if grid_pivot is None else grid_pivot
        element_pivot = self._element_pivot if element_pivot is None else element_pivot

        column, row = self.column_row_from_index(index)

        element_offset = pivot_offset(element_pivot, self._cell_size)
        spacing_offset = self._spacing_at_column_row(column, row, grid_pivot)
        padding_offset = self._padding.total

        relative = (
            np.array([column * self._cell_size[0], row * self._cell_size[1]], dtype=float)
            - element_offset
            + spacing_offset
            + padding_offset
        )
        grid_offset = pivot_offset(grid_pivot, self.grid_size)

        return self._position + relative - grid_offset

    def _spacing_at_column_row(self, column: int, row: int, pivot: GridPivot) -> np.ndarray:
        """Spacing offset of a cell, growing outward from the pivot's column and row.

        For centered pivots with an even count, the pivot lies halfway between
        the two middle cells, so those cells sit half a spacing away on each side.
        """
        if self._columns <= 0 or self._rows <= 0:
            logger.warning(
                f"Columns {self._columns} or rows {self._rows} is less than or equal to 0"
            )
            return np.zeros(2)
        if column < 0 or row < 0:
            logger.warning(f"Column {column} or row {row} is less than 0")
            return np.zeros(2)

        factor_x, factor_y = pivot_factors(pivot)
        pivot_column = factor_x * (self._columns - 1)
        pivot_row = factor_y * (self._rows - 1)

        return np.array(
            [(column - pivot_column) * self._spacing[0], (row - pivot_row) * self._spacing[1]],
            dtype=float,
        )

    def cell_area(self, index: int) -> FloatRect:
        """Exact rectangle (x, y, width, height) of the cell at an index."""
        x, y = self.position_at_index(index)
        return (float(x), float(y), float(self._cell_size[0]), float(self._cell_size[1]))

    def cell_rect(self, index: int) -> Rect:
        """Pixel rectangle of the cell at an index, anchored at the floored position."""
        x, y, width, height = self.cell_area(index)
        return (math.floor(x), math.floor(y), int(width), int(height))

    def point_in_item(self, index: int, point: VectorLike) -> bool:
        """Check whether a point lies inside the cell of the item at an index."""
        if index < 0 or index >= len(self._slots):
            return False
        return rect_contains(self.cell_area(index), point)

    def cell_bounds(self) -> t.List[Rect]:
        """Rectangles of every cell up to the grid's capacity, for outlining the layout."""
        return [self.cell_rect(index) for index in range(self.max_elements_in_grid)]
