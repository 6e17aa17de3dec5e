"""Distance-to-crossing math shared by the extractor and the array path.

Per-axis estimate
    Along each grid line through a point, the zero crossing between the
    point (centered value ``c``) and a neighbour on the other side of the
    level (centered value ``n``) sits at ``c / (c - n) * spacing`` from
    the point.  The closer of the two neighbours wins.

Combination
    The per-axis estimates are the legs of a right simplex whose
    hypotenuse face approximates the level set; the distance from the
    corner to that face is ``1 / sqrt(sum(1 / d_j**2))``.  Axes with no
    crossing carry the large sentinel and are left out of the sum.
"""

from __future__ import annotations

from math import sqrt
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

_Array = npt.NDArray[np.floating]
_BoolArray = npt.NDArray[np.bool_]


def _large_value(dtype: npt.DTypeLike) -> float:
    """Maximum representable value of *dtype*, used as the no-crossing marker."""
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.floating):
        return float(np.finfo(dtype).max)
    if np.issubdtype(dtype, np.integer):
        return float(np.iinfo(dtype).max)
    raise ValueError(f"unsupported pixel dtype {dtype}")


def _combine_axis_distances(candidates: Iterable[float], large_value: float) -> float:
    """Combine per-axis crossing distances; *large_value* if none is valid."""
    total = 0.0
    for d in sorted(candidates):
        if d >= large_value:
            break
        total += 1.0 / (d * d)

    if total == 0.0:
        return large_value
    return sqrt(1.0 / total)


def _shifted(a: _Array, axis: int, step: int, fill: float) -> _Array:
    """``out[i] = a[i + step]`` along *axis*, *fill* where that falls off the grid."""
    out = np.full_like(a, fill)
    n = a.shape[axis]
    src = [slice(None)] * a.ndim
    dst = [slice(None)] * a.ndim
    if step < 0:
        src[axis] = slice(0, n + step)
        dst[axis] = slice(-step, n)
    else:
        src[axis] = slice(step, n)
        dst[axis] = slice(0, n - step)
    out[tuple(dst)] = a[tuple(src)]
    return out


def neighborhood_distance_field(
    values: npt.ArrayLike,
    spacing: Optional[Sequence[float]] = None,
    level_set_value: float = 0.0,
    large_value: Optional[float] = None,
) -> Tuple[_Array, _BoolArray]:
    """Distance to the level set for every grid point at once.

    Parameters
    ----------
    values:
        N-D array of field samples.
    spacing:
        Per-array-axis spacing; ``1.0`` on every axis by default.
    level_set_value:
        Threshold defining the level set.
    large_value:
        Marker for points with no crossing on any axis.  Defaults to the
        maximum value of ``values.dtype``.

    Returns
    -------
    distance:
        float64 array, same shape as *values*.  ``0`` where the sample
        equals the threshold, *large_value* where undetermined.
    inside:
        Boolean array, ``True`` where the centered value is ``<= 0``.
    """
    arr = np.asarray(values)
    if large_value is None:
        large_value = _large_value(arr.dtype)
    if spacing is None:
        spacing = (1.0,) * arr.ndim
    if len(spacing) != arr.ndim:
        raise ValueError(f"spacing has {len(spacing)} entries for a {arr.ndim}-D array")

    c = arr.astype(np.float64) - level_set_value
    inside = c <= 0.0

    candidates = []
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for axis, sp in enumerate(spacing):
            best = np.full(c.shape, large_value, dtype=np.float64)
            for step in (-1, 1):
                # NaN marks out-of-region neighbours; both comparisons fail on it.
                nb = _shifted(c, axis, step, np.nan)
                crossing = ((nb > 0) & inside) | ((nb < 0) & ~inside)
                d = np.where(crossing, c / (c - nb) * float(sp), large_value)
                best = np.where(d < best, d, best)
            candidates.append(best)

        cand = np.sort(np.stack(candidates, axis=0), axis=0)
        total = np.zeros(c.shape, dtype=np.float64)
        for d in cand:
            total = total + np.where(d < large_value, 1.0 / (d * d), 0.0)
        distance = np.where(total == 0.0, large_value, np.sqrt(1.0 / total))

    distance = np.where(c == 0.0, 0.0, distance)
    return distance, inside
