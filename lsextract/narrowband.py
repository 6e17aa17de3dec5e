"""Build narrow-band node containers from a level-set image."""

from __future__ import annotations

import numpy as np

from .image import LevelSetImage
from .nodes import NodeContainer


def build_narrow_band(
    image: LevelSetImage,
    bandwidth: float,
    level_set_value: float = 0.0,
) -> NodeContainer:
    """Collect every pixel within ``bandwidth / 2`` of *level_set_value*.

    Nodes are emitted in C order and valued with the centered sample
    ``value - level_set_value``, so the container can be passed straight
    to :attr:`LevelSetNeighborhoodExtractor.input_narrow_band`.
    """
    if not bandwidth >= 0.0:
        raise ValueError(f"bandwidth must be non-negative, got {bandwidth}")

    centered = image.array.astype(np.float64) - level_set_value
    mask = np.abs(centered) <= bandwidth / 2.0

    offsets = np.argwhere(mask)  # C order
    indices = offsets + np.asarray(image.buffered_region.index, dtype=np.int64)
    return NodeContainer.from_arrays(
        indices.reshape(-1, image.ndim), centered[mask].reshape(-1)
    )
