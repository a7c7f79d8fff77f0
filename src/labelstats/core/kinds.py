"""
Statistic kinds written by labelstats.

Each statistic kind becomes its own output CSV file. A kind names the
position of its value in the engine's per-label table line.

The engine's table lines split into positional fields
``[_, labelID, mean, sd, max, min, count, volumeMM3, ...]``, so the label ID
sits at index 1 and Mean at index 2.

Examples
--------
>>> from labelstats.core.kinds import SUBJECT_SPACE_KINDS
>>> [kind.name for kind in SUBJECT_SPACE_KINDS]
['Mean', 'SD', 'Max', 'Min', 'Count', 'VolumeMM3']
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatKind:
    """
    One output statistic.

    Attributes
    ----------
    name : str
        Kind name, used in the output file name (e.g. "Mean" -> "<root>Mean.csv").
    field_index : int
        Position of the value in a split engine table line.
    """

    name: str
    field_index: int


MEAN = StatKind("Mean", 2)
SD = StatKind("SD", 3)
MAX = StatKind("Max", 4)
MIN = StatKind("Min", 5)
COUNT = StatKind("Count", 6)
VOLUME_MM3 = StatKind("VolumeMM3", 7)

ALL_KINDS: tuple[StatKind, ...] = (MEAN, SD, MAX, MIN, COUNT, VOLUME_MM3)

# Subject space reports everything for each image
SUBJECT_SPACE_KINDS: tuple[StatKind, ...] = ALL_KINDS

# Template space reports intensities per image; extents come from the label image pass
TEMPLATE_INTENSITY_KINDS: tuple[StatKind, ...] = (MEAN, SD, MAX, MIN)
LABEL_IMAGE_KINDS: tuple[StatKind, ...] = (COUNT, VOLUME_MM3)

#: File name prefix of the label image self-statistics tables
LABEL_IMAGE_PREFIX = "LabelImage"

