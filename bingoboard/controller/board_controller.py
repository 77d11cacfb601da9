"""
Board Controller

Owns the marked/unmarked state of every bingo cell and translates pointer
positions and control channel addresses into grid indices.

Cell state is shared between the main loop (pointer toggles) and the control
channel listener thread (address toggles), so every flip happens under a lock.
"""

import logging
import threading
import typing as t
from dataclasses import dataclass

import numpy as np

from bingoboard.common.config import ConfigManager
from bingoboard.common.constants import INVALID_INDEX
from bingoboard.common.enums import GridPivot
from bingoboard.common.utils import VectorLike
from bingoboard.controller.address import decode_address
from bingoboard.layout.grid import Grid, Padding

logger = logging.getLogger(__name__)


@dataclass
class Cell:
    """A single bingo cell."""

    marked: bool = False


class BoardController:
    """
    Bingo board made of a grid of cells that can be toggled.
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
    ):
        self.grid: Grid[Cell] = Grid(
            columns,
            rows,
            cell_size,
            position=position,
            spacing=spacing,
            padding=padding,
            grid_pivot=grid_pivot,
            element_pivot=element_pivot,
            constrain_by_column=constrain_by_column,
        )
        self._lock = threading.Lock()

        # External callback (renderer, logging)
        self.on_cell_toggled: t.Optional[t.Callable[[int, bool], None]] = None

    @classmethod
    def from_config(cls, config: ConfigManager) -> "BoardController":
        """Build a board from the layout settings in a config."""
        data = config.data
        padding = data.get("padding", {})
        return cls(
            data["columns"],
            data["rows"],
            data["cell_size"],
            position=data["position_offset"],
            spacing=data["spacing"],
            padding=Padding(
                padding.get("left", 0),
                padding.get("right", 0),
                padding.get("top", 0),
                padding.get("bottom", 0),
            ),
            grid_pivot=config.get_pivot("grid_pivot"),
            element_pivot=config.get_pivot("element_pivot"),
            constrain_by_column=bool(data.get("constrain_by_column", True)),
        )

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def initialize(self) -> None:
        """Fill the grid with one unmarked cell per grid position."""
        with self._lock:
            self._populate()
        logger.info(
            f"Board initialized with {self.grid.num_elements_in_grid} cells "
            f"({self.grid.columns}x{self.grid.rows})"
        )

    def _populate(self) -> None:
        # Position everything once at the end instead of after every add
        self.grid.automatic_reposition = False
        try:
            self.grid.clear()
            for _ in range(self.grid.max_elements_in_grid):
                self.grid.add_item(Cell())
            self.grid.recompute_all_positions()
        finally:
            self.grid.automatic_reposition = True

    def reconfigure(
        self,
        columns: t.Optional[int] = None,
        rows: t.Optional[int] = None,
        cell_size: t.Optional[VectorLike] = None,
        position: t.Optional[VectorLike] = None,
        spacing: t.Optional[VectorLike] = None,
        padding: t.Optional[Padding] = None,
        grid_pivot: t.Optional[GridPivot] = None,
        element_pivot: t.Optional[GridPivot] = None,
    ) -> None:
        """Apply new layout settings and rebuild the board with every cell unmarked."""
        with self._lock:
            self.grid.automatic_reposition = False
            if columns is not None:
                self.grid.set_columns(columns)
            if rows is not None:
                self.grid.set_rows(rows)
            if cell_size is not None:
                self.grid.set_cell_size(cell_size)
            if position is not None:
                self.grid.set_position(position)
            if spacing is not None:
                self.grid.set_spacing(spacing)
            if padding is not None:
                self.grid.set_padding(padding.left, padding.right, padding.top, padding.bottom)
            if grid_pivot is not None:
                self.grid.set_grid_pivot(grid_pivot)
            if element_pivot is not None:
                self.grid.set_element_pivot(element_pivot)
            self._populate()
        logger.info(f"Board rebuilt as {self.grid.columns}x{self.grid.rows}")

    # ============================================================================
    # TOGGLING
    # ============================================================================

    def _toggle_locked(self, index: int) -> t.Optional[bool]:
        """Flip a cell while holding the lock. Returns its new state, or None."""
        if index < 0 or index >= self.grid.num_elements_in_grid:
            logger.debug(f"Ignoring toggle for index {index}")
            return None
        cell = self.grid.get_item(index)
        cell.marked = not cell.marked
        return cell.marked

    def _notify_toggled(self, index: int, marked: t.Optional[bool]) -> bool:
        if marked is None:
            return False
        logger.debug(f"Cell {index} {'marked' if marked else 'unmarked'}")
        if self.on_cell_toggled:
            self.on_cell_toggled(index, marked)
        return True

    def toggle_by_index(self, index: int) -> bool:
        """Flip the marked state of the cell at an index.

        Returns:
            True if a cell was toggled
        """
        with self._lock:
            marked = self._toggle_locked(index)
        return self._notify_toggled(index, marked)

    def toggle_by_address(self, address: t.Optional[str]) -> bool:
        """Flip the cell named by a two-character address such as "a1".

        Malformed or out of range addresses are ignored.

        Returns:
            True if a cell was toggled
        """
        decoded = decode_address(address)
        if decoded is None:
            logger.debug(f"Ignoring malformed address {address!r}")
            return False

        column, row = decoded
        # Resolve against the layout the flip is applied to
        with self._lock:
            if not self.grid.in_bounds(column, row):
                logger.debug(f"Ignoring address {address!r} outside the board")
                return False
            index = self.grid.index_from_column_row(column, row)
            marked = self._toggle_locked(index)
        return self._notify_toggled(index, marked)

    def pointer_toggle(self, point: VectorLike) -> bool:
        """Toggle the first cell containing a point (e.g. a mouse click).

        Returns:
            True if a cell was toggled
        """
        with self._lock:
            index = self._index_at_point(point)
            marked = self._toggle_locked(index)
        return self._notify_toggled(index, marked)

    def index_at_point(self, point: VectorLike) -> int:
        """Get the index of the first cell containing a point, or INVALID_INDEX."""
        with self._lock:
            return self._index_at_point(point)

    def _index_at_point(self, point: VectorLike) -> int:
        for index in range(self.grid.num_elements_in_grid):
            if self.grid.point_in_item(index, point):
                return index
        return INVALID_INDEX

    def clear_marks(self) -> None:
        """Unmark every cell."""
        with self._lock:
            for cell in self.grid.items:
                cell.marked = False

    # ============================================================================
    # QUERIES
    # ============================================================================

    def is_marked(self, index: int) -> bool:
        with self._lock:
            if index < 0 or index >= self.grid.num_elements_in_grid:
                return False
            return self.grid.get_item(index).marked

    def marked_indices(self) -> t.List[int]:
        """Indices of all marked cells, in index order."""
        with self._lock:
            return [index for index, cell in enumerate(self.grid.items) if cell.marked]

    def iter_marked(self) -> t.Iterator[t.Tuple[int, np.ndarray]]:
        """Yield (index, position) for every marked cell, for drawing marks."""
        for index in self.marked_indices():
            position = self.cell_position(index)
            if position is not None:
                yield index, position

    def cell_position(self, index: int) -> t.Optional[np.ndarray]:
        with self._lock:
            return self.grid.get_position(index)
