"""
Base class for statistics engines.

An engine turns a gray image and a label image into a per-label statistics
table (see :mod:`labelstats.engine.records`). Subclasses only produce the
table text; skipping absent images and parsing is shared here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from labelstats.core.jobs import ImageJob
from labelstats.engine.records import LabelStatRecord, parse_stat_table

logger = logging.getLogger(__name__)


class StatsEngine(ABC):
    """
    Abstract base class for statistics engines.

    Subclasses must implement two methods:
    - `label_stats_table`: statistics of a gray image within each label
    - `label_image_table`: count and volume of each label of a label image

    Both return the raw table text, header line included.
    """

    #: Short name used in configuration and log messages
    name: str = "engine"

    @abstractmethod
    def label_stats_table(
        self,
        image: Path,
        label_image: Path,
        scale: float = 1.0,
        copy_transform: bool = False,
    ) -> str:
        """
        Compute the statistics table of ``image`` over the labels of ``label_image``.

        Parameters
        ----------
        image : Path
            Gray image.
        label_image : Path
            Label image on the same voxel grid.
        scale : float, default=1.0
            Multiplier applied to gray intensities before statistics are taken.
            Neither image on disk is changed.
        copy_transform : bool, default=False
            Give the label image the gray image's spatial transform, in memory,
            before computing. No alignment check is made.
        """

    @abstractmethod
    def label_image_table(self, label_image: Path) -> str:
        """Compute the statistics table of a label image against itself."""

    def compute(
        self,
        job: ImageJob,
        scale: float = 1.0,
        copy_transform: bool = False,
    ) -> dict[int, LabelStatRecord]:
        """
        Compute and parse the statistics for one image job.

        Jobs with an absent member are not sent to the engine; they yield an
        empty lookup so every label comes out as NA.

        Returns
        -------
        dict[int, LabelStatRecord]
            Records of the labels the engine found, keyed by label ID.

        Raises
        ------
        EngineError
            If the engine fails or its output cannot be parsed.
        """
        if job.is_absent:
            logger.debug(f"Skipping absent image job {job.image} {job.label_image}")
            return {}

        text = self.label_stats_table(
            job.image.path,
            job.label_image.path,
            scale=scale,
            copy_transform=copy_transform,
        )
        return parse_stat_table(text)

    def compute_label_image(self, label_image: Path) -> dict[int, LabelStatRecord]:
        """Compute and parse the self-statistics of a label image."""
        return parse_stat_table(self.label_image_table(Path(label_image)))

    def check_available(self) -> bool:
        """Raise EngineError if the engine cannot run here. Returns True otherwise."""
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
