"""Core data structures: labels, image jobs, statistic kinds and row reconciliation."""

from labelstats.core.exceptions import (
    EngineError,
    FileAccessError,
    ImageListMismatchError,
    LabelDefinitionError,
    LabelStatsError,
    TableShapeError,
    UsageError,
)
from labelstats.core.jobs import ABSENT_TOKEN, ImageJob, ImageRef, resolve_image_list
from labelstats.core.kinds import StatKind
from labelstats.core.labels import LabelDictionary, load_label_definitions
from labelstats.core.reconcile import NA_TOKEN, build_header, build_stat_rows

__all__ = [
    "ABSENT_TOKEN",
    "EngineError",
    "FileAccessError",
    "ImageJob",
    "ImageListMismatchError",
    "ImageRef",
    "LabelDefinitionError",
    "LabelDictionary",
    "LabelStatsError",
    "NA_TOKEN",
    "StatKind",
    "TableShapeError",
    "UsageError",
    "build_header",
    "build_stat_rows",
    "load_label_definitions",
    "resolve_image_list",
]
