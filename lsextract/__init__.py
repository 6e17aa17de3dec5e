"""
lsextract: level-set neighborhood extraction on numpy grids
===========================================================

Locates the grid points adjacent to the zero crossing of a sampled scalar
field, estimates each one's distance to the crossing, and splits them
into *inside* and *outside* node sets. This is the narrow-band step a level-set
segmentation uses to reinitialize or advance its evolution.

Implemented features
--------------------
- Grid access: :class:`LevelSetImage`, :class:`ImageRegion`,
  :func:`sample_levelset`
- Nodes: :class:`Node`, :class:`NodeContainer`
- Extraction: :class:`LevelSetNeighborhoodExtractor` (full scan or
  narrow band), :class:`ExtractorConfig`, :class:`ExtractionMode`
- Array path: :func:`neighborhood_distance_field`
- Narrow bands: :func:`build_narrow_band`

Quick start
-----------

Full scan::

    import numpy as np
    from lsextract import LevelSetNeighborhoodExtractor, sample_levelset

    circle = lambda p: np.linalg.norm(p, axis=-1) - 0.5
    image  = sample_levelset(circle, ((-1.0, 1.0), (-1.0, 1.0)), (64, 64))

    ex = LevelSetNeighborhoodExtractor(input_level_set=image)
    ex.locate()
    inside_idx, inside_dist = ex.inside_points.to_arrays()

Narrow band::

    from lsextract import build_narrow_band

    ex.input_narrow_band = build_narrow_band(image, bandwidth=0.2)
    ex.narrow_banding = True
    ex.narrow_bandwidth = 0.2
    ex.locate()
"""

from ._math import neighborhood_distance_field
from .extractor import (
    ExtractionMode,
    ExtractorConfig,
    LevelSetNeighborhoodExtractor,
    MissingInputError,
)
from .image import ImageRegion, LevelSetImage, sample_levelset
from .narrowband import build_narrow_band
from .nodes import Node, NodeContainer

__version__ = "0.1.0"

__all__ = [
    # Grid access
    "ImageRegion",
    "LevelSetImage",
    "sample_levelset",

    # Nodes
    "Node",
    "NodeContainer",

    # Extraction
    "LevelSetNeighborhoodExtractor",
    "ExtractorConfig",
    "ExtractionMode",
    "MissingInputError",

    # Array path
    "neighborhood_distance_field",

    # Narrow bands
    "build_narrow_band",
]
