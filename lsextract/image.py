"""Read-only level-set images on uniform N-dimensional grids.

Indices are tuples in numpy axis order (axis 0 first), so
``image.get_pixel(idx)`` reads the same sample as ``array[idx]`` when the
buffered region starts at the origin.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from ._math import _large_value
from .nodes import GridIndex

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
_Array = npt.NDArray[np.floating]
_FieldFunc = Callable[[_Array], _Array]
_Bounds = Sequence[Tuple[float, float]]


# ===========================================================================
# Region
# ===========================================================================

@dataclass(frozen=True)
class ImageRegion:
    """Bounded box of grid indices: a start *index* and a per-axis *size*."""

    index: GridIndex
    size: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "index", tuple(int(i) for i in self.index))
        object.__setattr__(self, "size", tuple(int(s) for s in self.size))
        if len(self.index) != len(self.size):
            raise ValueError(
                f"region index has {len(self.index)} axes but size has {len(self.size)}"
            )
        if any(s < 0 for s in self.size):
            raise ValueError(f"region size must be non-negative, got {self.size}")

    @property
    def dimension(self) -> int:
        return len(self.size)

    @property
    def number_of_pixels(self) -> int:
        return int(np.prod(self.size, dtype=np.int64))

    @property
    def upper_index(self) -> GridIndex:
        """Last valid index along each axis (inclusive)."""
        return tuple(i + s - 1 for i, s in zip(self.index, self.size))

    def is_inside(self, index: Sequence[int]) -> bool:
        """True if *index* lies within the region."""
        for i, lo, n in zip(index, self.index, self.size):
            if i < lo or i >= lo + n:
                return False
        return True

    def indices(self) -> Iterator[GridIndex]:
        """Yield every index of the region in C order (last axis fastest)."""
        start = self.index
        for offset in np.ndindex(*self.size):
            yield tuple(s + o for s, o in zip(start, offset))


# ===========================================================================
# Level-set image
# ===========================================================================

class LevelSetImage:
    """A scalar field sampled on a uniform grid with per-axis spacing.

    Parameters
    ----------
    values:
        N-dimensional array of samples.  The image keeps a reference; it
        never writes to it.
    spacing:
        Physical distance between neighbouring samples along each array
        axis.  Defaults to ``1.0`` on every axis.
    start_index:
        Grid index of ``values[0, ..., 0]``.  Defaults to the origin.
    """

    def __init__(
        self,
        values: npt.ArrayLike,
        spacing: Optional[Sequence[float]] = None,
        start_index: Optional[Sequence[int]] = None,
    ) -> None:
        arr = np.asarray(values)
        if arr.ndim == 0:
            raise ValueError("level-set image must have at least one axis")

        if spacing is None:
            spacing = (1.0,) * arr.ndim
        spacing = tuple(float(s) for s in spacing)
        if len(spacing) != arr.ndim:
            raise ValueError(f"spacing has {len(spacing)} entries for a {arr.ndim}-D image")
        if any(not s > 0.0 for s in spacing):
            raise ValueError(f"spacing must be positive, got {spacing}")

        if start_index is None:
            start_index = (0,) * arr.ndim

        self._array = arr
        self._limit = _large_value(arr.dtype)
        self._spacing = spacing
        self._region = ImageRegion(tuple(start_index), arr.shape)

    def __repr__(self) -> str:
        return (
            f"LevelSetImage(shape={self._array.shape}, dtype={self._array.dtype}, "
            f"spacing={self._spacing}, start_index={self._region.index})"
        )

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def dtype(self) -> np.dtype:
        return self._array.dtype

    @property
    def ndim(self) -> int:
        return self._array.ndim

    @property
    def spacing(self) -> Tuple[float, ...]:
        return self._spacing

    @property
    def buffered_region(self) -> ImageRegion:
        return self._region

    def get_pixel(self, index: Sequence[int]):
        """Sample at grid *index*.

        Raises
        ------
        ValueError
            *index* has the wrong number of axes.
        IndexError
            *index* lies outside the buffered region.
        """
        start = self._region.index
        if len(index) != len(start):
            raise ValueError(f"expected a {len(start)}-D index, got {tuple(index)}")
        if not self._region.is_inside(index):
            raise IndexError(f"index {tuple(index)} is outside the region {self._region}")
        return self._array[tuple(i - s for i, s in zip(index, start))]

    def pixel_limit(self) -> float:
        """Largest value representable by the pixel dtype."""
        return self._limit


# ===========================================================================
# Sampling
# ===========================================================================

def sample_levelset(
    func: _FieldFunc,
    bounds: _Bounds,
    resolution: Sequence[int],
) -> LevelSetImage:
    """Sample *func* on a uniform N-D cell-centred grid.

    Parameters
    ----------
    func:
        Callable taking a ``(..., N)`` array of points with coordinates in
        ``(x, y, z, ...)`` order and returning a ``(...)`` array.
    bounds:
        ``((x0, x1), (y0, y1), ...)`` physical extents of the domain.
    resolution:
        ``(nx, ny, ...)`` number of cells along each coordinate.

    Returns
    -------
    LevelSetImage
        Array of shape ``resolution[::-1]`` (last coordinate first) with
        spacing ``(hi - lo) / n`` for the matching array axis.
    """
    if len(bounds) != len(resolution):
        raise ValueError(
            f"bounds has {len(bounds)} axes but resolution has {len(resolution)}"
        )

    axes = []
    steps = []
    for (lo, hi), n in zip(bounds, resolution):
        step = (hi - lo) / n
        axes.append(np.linspace(lo, hi, n, endpoint=False) + step / 2.0)
        steps.append(step)

    grids = np.meshgrid(*axes[::-1], indexing="ij")
    p = np.stack(grids[::-1], axis=-1)
    return LevelSetImage(func(p), spacing=steps[::-1])
