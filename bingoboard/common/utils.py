import typing as t

import numpy as np

from bingoboard.common.enums import GridPivot

VectorLike = t.Union[np.ndarray, t.Sequence[float]]

_PIVOT_FACTORS: t.Dict[GridPivot, t.Tuple[float, float]] = {
    GridPivot.UPPER_LEFT: (0.0, 0.0),
    GridPivot.UPPER_CENTER: (0.5, 0.0),
    GridPivot.UPPER_RIGHT: (1.0, 0.0),
    GridPivot.CENTER_LEFT: (0.0, 0.5),
    GridPivot.CENTER: (0.5, 0.5),
    GridPivot.CENTER_RIGHT: (1.0, 0.5),
    GridPivot.BOTTOM_LEFT: (0.0, 1.0),
    GridPivot.BOTTOM_CENTER: (0.5, 1.0),
    GridPivot.BOTTOM_RIGHT: (1.0, 1.0),
}


def vec2(value: VectorLike) -> np.ndarray:
    """Convert a pair of numbers to a float vector of shape (2,)."""
    arr = np.asarray(value, dtype=float).reshape(-1)
    if arr.shape != (2,):
        raise ValueError(f"Expected a 2D vector, got {value!r}")
    return arr.copy()


def pivot_factors(pivot: GridPivot) -> t.Tuple[float, float]:
    """Fraction of the extent (0, 0.5 or 1) a pivot sits at on each axis."""
    return _PIVOT_FACTORS.get(pivot, (0.0, 0.0))


def pivot_offset(pivot: GridPivot, size: VectorLike) -> np.ndarray:
    """Offset of a pivot inside a rectangle of the given size."""
    return np.asarray(pivot_factors(pivot), dtype=float) * vec2(size)


def rect_contains(rect: t.Tuple[float, float, float, float], point: VectorLike) -> bool:
    """Half-open containment test for an (x, y, width, height) rectangle."""
    x, y, width, height = rect
    px, py = vec2(point)
    return x <= px < x + width and y <= py < y + height


def parse_pivot(value: t.Union[str, GridPivot]) -> t.Optional[GridPivot]:
    """Convert "UpperLeft", "upper_left" or "UPPER-LEFT" style names to a pivot."""
    if isinstance(value, GridPivot):
        return value
    key = str(value).strip().replace("-", "_").replace(" ", "_")
    if not key.isupper():
        # CamelCase -> snake_case
        key = "".join(
            f"_{c}" if c.isupper() and i > 0 and key[i - 1] != "_" else c
            for i, c in enumerate(key)
        )
    try:
        return GridPivot(key.lower())
    except ValueError:
        return None
