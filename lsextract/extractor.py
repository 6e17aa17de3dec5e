"""Locate the grid points next to a level set and estimate their distance to it.

:class:`LevelSetNeighborhoodExtractor` scans a :class:`~lsextract.image.LevelSetImage`
(every pixel, or only the nodes of a caller-supplied narrow band), estimates
for each point the distance to the ``level_set_value`` crossing, and sorts
the points into an *inside* and an *outside* :class:`~lsextract.nodes.NodeContainer`.

Quick start
-----------
>>> import numpy as np
>>> from lsextract import LevelSetImage, LevelSetNeighborhoodExtractor
>>> image = LevelSetImage(np.array([-1.5, -0.5, 0.5, 1.5]))
>>> ex = LevelSetNeighborhoodExtractor(input_level_set=image)
>>> ex.locate()
>>> [(n.index, n.value) for n in ex.inside_points]
[((1,), 0.5)]
>>> [(n.index, n.value) for n in ex.outside_points]
[((2,), 0.5)]
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ._math import _combine_axis_distances
from .image import ImageRegion, LevelSetImage
from .nodes import Node, NodeContainer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


# ===========================================================================
# Configuration and errors
# ===========================================================================

class ExtractionMode(Enum):
    """Which candidate points a run visits."""

    FULL = "full"
    NARROW_BAND = "narrow_band"


@dataclass(frozen=True)
class ExtractorConfig:
    """Configuration for a :class:`LevelSetNeighborhoodExtractor`.

    Parameters
    ----------
    level_set_value:
        Field value that defines the level set.
    narrow_bandwidth:
        Full width of the band.  Candidates farther than half of it from
        the level are skipped in narrow-band mode.
    mode:
        Scan every pixel or only the input narrow band.  Accepts an
        :class:`ExtractionMode` or its string value.
    """
    level_set_value: float = 0.0
    narrow_bandwidth: float = 12.0
    mode: ExtractionMode = ExtractionMode.FULL

    def __post_init__(self):
        """Validate configuration."""
        if not math.isfinite(self.level_set_value):
            raise ValueError(f"level_set_value must be finite, got {self.level_set_value}")
        if not self.narrow_bandwidth >= 0.0:
            raise ValueError(
                f"narrow_bandwidth must be non-negative, got {self.narrow_bandwidth}"
            )
        object.__setattr__(self, "mode", ExtractionMode(self.mode))


class MissingInputError(RuntimeError):
    """A run was started without an input it needs."""


# ===========================================================================
# Extractor
# ===========================================================================

class LevelSetNeighborhoodExtractor:
    """Find the points near a level set and their distance to it.

    Parameters
    ----------
    input_level_set:
        Image to scan.  Required before :meth:`locate`.
    input_narrow_band:
        Candidate nodes for narrow-band mode.  Read, never modified.
    config:
        Full configuration.  Mutually exclusive with the keyword overrides
        below.
    level_set_value, narrow_bandwidth, narrow_banding:
        Shorthand for building an :class:`ExtractorConfig`.

    After :meth:`locate`, :attr:`inside_points` holds points with
    ``value <= level_set_value`` and :attr:`outside_points` the rest, each
    node valued with the (non-negative) distance estimate.  Points with no
    crossing along any axis are left out of both.
    """

    def __init__(
        self,
        input_level_set: Optional[LevelSetImage] = None,
        input_narrow_band: Optional[NodeContainer] = None,
        config: Optional[ExtractorConfig] = None,
        *,
        level_set_value: Optional[float] = None,
        narrow_bandwidth: Optional[float] = None,
        narrow_banding: Optional[bool] = None,
    ) -> None:
        overrides = (level_set_value, narrow_bandwidth, narrow_banding)
        if config is not None and any(v is not None for v in overrides):
            raise ValueError("pass either config or keyword overrides, not both")
        if config is None:
            defaults = ExtractorConfig()
            config = ExtractorConfig(
                level_set_value=defaults.level_set_value if level_set_value is None else level_set_value,
                narrow_bandwidth=defaults.narrow_bandwidth if narrow_bandwidth is None else narrow_bandwidth,
                mode=ExtractionMode.NARROW_BAND if narrow_banding else ExtractionMode.FULL,
            )

        self.config = config
        self.input_level_set = input_level_set
        self.input_narrow_band = input_narrow_band

        self._inside_points: Optional[NodeContainer] = None
        self._outside_points: Optional[NodeContainer] = None
        self._region: Optional[ImageRegion] = None
        self._observers: List[ProgressCallback] = []
        self.last_point_is_inside = False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(level_set_value={self.level_set_value}, "
            f"mode={self.config.mode.value}, narrow_bandwidth={self.narrow_bandwidth}, "
            f"input_level_set={self.input_level_set!r})"
        )

    # ------------------------------------------------------------------
    # Configuration accessors
    # ------------------------------------------------------------------

    @property
    def level_set_value(self) -> float:
        return self.config.level_set_value

    @level_set_value.setter
    def level_set_value(self, value: float) -> None:
        self.config = ExtractorConfig(value, self.config.narrow_bandwidth, self.config.mode)

    @property
    def narrow_bandwidth(self) -> float:
        return self.config.narrow_bandwidth

    @narrow_bandwidth.setter
    def narrow_bandwidth(self, value: float) -> None:
        self.config = ExtractorConfig(self.config.level_set_value, value, self.config.mode)

    @property
    def narrow_banding(self) -> bool:
        return self.config.mode is ExtractionMode.NARROW_BAND

    @narrow_banding.setter
    def narrow_banding(self, on: bool) -> None:
        mode = ExtractionMode.NARROW_BAND if on else ExtractionMode.FULL
        self.config = ExtractorConfig(self.config.level_set_value, self.config.narrow_bandwidth, mode)

    @property
    def large_value(self) -> float:
        """No-crossing marker: the largest value of the input pixel type."""
        if self.input_level_set is None:
            raise MissingInputError("input level set is not set")
        return self.input_level_set.pixel_limit()

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def inside_points(self) -> Optional[NodeContainer]:
        return self._inside_points

    @property
    def outside_points(self) -> Optional[NodeContainer]:
        return self._outside_points

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def add_observer(self, callback: ProgressCallback) -> None:
        """Call ``callback(fraction)`` with run progress in ``[0, 1]``."""
        self._observers.append(callback)

    def remove_observer(self, callback: ProgressCallback) -> None:
        self._observers.remove(callback)

    def _update_progress(self, fraction: float) -> None:
        for cb in self._observers:
            cb(fraction)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def locate(self) -> None:
        """Run one extraction and replace :attr:`inside_points` / :attr:`outside_points`.

        Raises
        ------
        MissingInputError
            No input level set, or narrow-band mode without an input
            narrow band.  Outputs from a previous run are left untouched.
        ValueError
            A narrow-band node index has the wrong number of axes.
        IndexError
            A narrow-band node index lies outside the image region.

        The narrow band is checked as a whole before the outputs are
        replaced, so a rejected band also leaves previous outputs untouched.
        """
        if self.input_level_set is None:
            raise MissingInputError("input level set is not set")
        if self.narrow_banding:
            if self.input_narrow_band is None:
                raise MissingInputError("narrow banding is on but input narrow band is not set")
            self._check_narrow_band()

        self.initialize()

        if self.narrow_banding:
            logger.debug(
                "Narrow-band extraction: %d candidates, bandwidth %g, level %g",
                self.input_narrow_band.size(), self.narrow_bandwidth, self.level_set_value,
            )
            self._generate_data_narrow_band()
        else:
            logger.debug(
                "Full extraction: %d pixels, level %g",
                self._region.number_of_pixels, self.level_set_value,
            )
            self._generate_data_full()

        logger.debug("No. inside points: %d", self._inside_points.size())
        logger.debug("No. outside points: %d", self._outside_points.size())

    generate_data = locate

    def initialize(self) -> None:
        """Allocate empty output containers and cache the image region."""
        if self.input_level_set is None:
            raise MissingInputError("input level set is not set")
        self._inside_points = NodeContainer()
        self._outside_points = NodeContainer()
        self._region = self.input_level_set.buffered_region
        self.last_point_is_inside = False

    def _check_narrow_band(self) -> None:
        region = self.input_level_set.buffered_region
        for node in self.input_narrow_band:
            if len(node.index) != region.dimension:
                raise ValueError(
                    f"narrow band node {node.index} is not a {region.dimension}-D index"
                )
            if not region.is_inside(node.index):
                raise IndexError(f"narrow band node {node.index} is outside the region {region}")

    def _scan(self, candidates: Iterable[Optional[Tuple[int, ...]]], total: int) -> None:
        update_visits = max(total // 10, 1)
        for i, index in enumerate(candidates):
            if i % update_visits == 0:
                self._update_progress(i / total)
            if index is not None:
                self.calculate_distance(index)
        self._update_progress(1.0)

    def _generate_data_full(self) -> None:
        self._scan(self._region.indices(), self._region.number_of_pixels)

    def _generate_data_narrow_band(self) -> None:
        image = self.input_level_set
        level = self.level_set_value
        max_value = self.narrow_bandwidth / 2.0

        def _candidates():
            for node in self.input_narrow_band:
                if abs(float(image.get_pixel(node.index)) - level) <= max_value:
                    yield node.index
                else:
                    yield None

        self._scan(_candidates(), self.input_narrow_band.size())

    # ------------------------------------------------------------------
    # Per-point distance
    # ------------------------------------------------------------------

    def calculate_distance(self, index: Sequence[int]) -> float:
        """Estimate the distance from grid *index* to the level set.

        Appends one node to the inside or outside container unless no
        axis has a crossing, in which case :attr:`large_value` is returned
        and nothing is appended.  Outputs are initialized on first use
        if neither :meth:`initialize` nor :meth:`locate` has run.  An
        *index* outside the image region raises ``IndexError``.
        """
        if self._inside_points is None:
            self.initialize()

        self.last_point_is_inside = False

        image = self.input_level_set
        region = self._region
        level = self.level_set_value
        large_value = image.pixel_limit()
        index = tuple(int(i) for i in index)

        center_value = float(image.get_pixel(index)) - level

        if center_value == 0.0:
            self._inside_points.append(Node(index, 0.0))
            self.last_point_is_inside = True
            return 0.0

        inside = center_value <= 0.0

        # Per-axis crossing distance by linear interpolation along the grid line.
        nodes_used = []
        for j, spacing in enumerate(image.spacing):
            best = large_value
            for s in (-1, 1):
                neigh_index = index[:j] + (index[j] + s,) + index[j + 1:]
                if not region.is_inside(neigh_index):
                    continue

                neigh_value = float(image.get_pixel(neigh_index)) - level
                if (neigh_value > 0 and inside) or (neigh_value < 0 and not inside):
                    distance = center_value / (center_value - neigh_value) * spacing
                    if best > distance:
                        best = distance

            nodes_used.append(best)

        distance = _combine_axis_distances(nodes_used, large_value)
        if distance >= large_value:
            return large_value

        if inside:
            self._inside_points.append(Node(index, distance))
            self.last_point_is_inside = True
        else:
            self._outside_points.append(Node(index, distance))
            self.last_point_is_inside = False

        return distance
