"""
Reconciliation of per-image statistics with the label dictionary.

Every output row has one cell per defined label, in label ID order, no matter
which labels the engine actually reported for that image. Labels the engine
did not report become ``NA``; reported labels that are not defined are
dropped.

Examples
--------
>>> labels = LabelDictionary({0: "clear", 1: "gray", 2: "white"})
>>> build_header(labels, include_label_image=True)
['Image', 'LabelImage', 'clear', 'gray', 'white']
>>> rows = build_stat_rows(job, {1: record}, labels, (MEAN,), include_label_image=True)
>>> rows["Mean"]
['img.nii.gz', 'labelmap.nii.gz', 'NA', '0.5', 'NA']
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from labelstats.core.jobs import ImageJob
from labelstats.core.kinds import StatKind
from labelstats.core.labels import LabelDictionary

if TYPE_CHECKING:
    from labelstats.engine.records import LabelStatRecord

#: Cell value for a label with no statistics
NA_TOKEN = "NA"


def build_header(labels: LabelDictionary, include_label_image: bool) -> list[str]:
    """Header row: identifier column(s) followed by label names in ID order."""
    prefix = ["Image", "LabelImage"] if include_label_image else ["Image"]
    return prefix + list(labels.names)


def row_width(labels: LabelDictionary, include_label_image: bool) -> int:
    """Number of columns every row of a table must have."""
    return (2 if include_label_image else 1) + len(labels)


def build_label_cells(
    stats: Mapping[int, LabelStatRecord],
    labels: LabelDictionary,
    kind: StatKind,
) -> list[str]:
    """One cell per defined label: the kind's value if reported, NA otherwise."""
    cells = []
    for label_id in labels:
        record = stats.get(label_id)
        cells.append(NA_TOKEN if record is None else record.field(kind.field_index))
    return cells


def build_stat_rows(
    job: ImageJob,
    stats: Mapping[int, LabelStatRecord],
    labels: LabelDictionary,
    kinds: Sequence[StatKind],
    include_label_image: bool,
) -> dict[str, list[str]]:
    """
    Build one output row per statistic kind for an image job.

    Parameters
    ----------
    job : ImageJob
        Job the statistics belong to; supplies the identifier column(s).
    stats : Mapping[int, LabelStatRecord]
        Records reported by the engine, keyed by label ID. Empty for absent jobs.
    labels : LabelDictionary
        Defined labels; fixes the columns and their order.
    kinds : sequence of StatKind
        Statistic kinds to build rows for.
    include_label_image : bool
        Whether rows carry the label image identifier after the image identifier
        (subject space) or only the image identifier (template space).

    Returns
    -------
    dict[str, list[str]]
        Row per kind name. Each row has ``row_width(labels, include_label_image)`` cells.
    """
    prefix = [job.image.identifier]
    if include_label_image:
        prefix.append(job.label_image.identifier)

    return {kind.name: prefix + build_label_cells(stats, labels, kind) for kind in kinds}


def build_label_image_rows(
    label_image_identifier: str,
    stats: Mapping[int, LabelStatRecord],
    labels: LabelDictionary,
    kinds: Sequence[StatKind],
) -> dict[str, list[str]]:
    """Rows of the label image self-statistics tables (image identifier only)."""
    return {
        kind.name: [label_image_identifier] + build_label_cells(stats, labels, kind)
        for kind in kinds
    }
