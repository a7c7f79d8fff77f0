"""
Label statistics runs.

Ties together label definitions, image jobs, the statistics engine and the
table writer. Images are processed one at a time in input order; each image
adds exactly one row to every statistic table.

Examples
--------
>>> from labelstats.core.pipeline import RunContext, run_subject_space
>>> from labelstats.engine import C3dEngine
>>> context = RunContext(
...     labels=load_label_definitions("labels.csv"),
...     engine=C3dEngine(),
...     output_root="out/study_",
... )
>>> summary = run_subject_space(jobs, context)
>>> summary.output_files
[PosixPath('out/study_Mean.csv'), ...]
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from labelstats.core.jobs import ImageJob, ImageRef
from labelstats.core.kinds import (
    LABEL_IMAGE_KINDS,
    LABEL_IMAGE_PREFIX,
    SUBJECT_SPACE_KINDS,
    TEMPLATE_INTENSITY_KINDS,
    StatKind,
)
from labelstats.core.labels import LabelDictionary
from labelstats.core.reconcile import build_header, build_label_image_rows, build_stat_rows
from labelstats.engine.base import StatsEngine
from labelstats.io.writer import StatTableWriter
from labelstats.utils.logging import ConsoleLogger

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """
    Everything a run needs besides its image jobs.

    Attributes
    ----------
    labels : LabelDictionary
        Defined labels; fix output columns.
    engine : StatsEngine
        Engine computing per-label statistics.
    output_root : str
        Prefix of every output file path.
    scale : float
        Multiplier applied to gray intensities before statistics are taken.
    show_progress : bool
        Show a progress bar over images.
    console : ConsoleLogger
        User-facing messages.
    """

    labels: LabelDictionary
    engine: StatsEngine
    output_root: str
    scale: float = 1.0
    show_progress: bool = False
    console: ConsoleLogger = field(default_factory=ConsoleLogger)


@dataclass
class RunSummary:
    """Outcome of a run."""

    n_images: int = 0
    n_absent: int = 0
    output_files: list[Path] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "images": self.n_images,
            "absent": self.n_absent,
            "files": len(self.output_files),
        }


def _process_jobs(
    jobs: Sequence[ImageJob],
    context: RunContext,
    kinds: Sequence[StatKind],
    include_label_image: bool,
    copy_transform: bool,
) -> RunSummary:
    header = build_header(context.labels, include_label_image=include_label_image)
    summary = RunSummary()

    with StatTableWriter(context.output_root, kinds, header) as writer:
        summary.output_files.extend(writer.paths)

        iterator = tqdm(
            jobs,
            desc=f"Computing label statistics ({context.engine.name})",
            unit="image",
            disable=not context.show_progress,
        )
        for i, job in enumerate(iterator, start=1):
            if include_label_image:
                message = f"Processing {job.image} {job.label_image}"
            else:
                message = f"Processing {job.image}"
            context.console.progress(message, current=i, total=len(jobs), verbose=context.show_progress)

            if job.is_absent:
                summary.n_absent += 1
                context.console.warning("Image marked NA, writing NA row", indent_level=1)

            stats = context.engine.compute(job, scale=context.scale, copy_transform=copy_transform)

            unreported = [label_id for label_id in context.labels if label_id not in stats]
            if unreported and not job.is_absent:
                logger.info(f"{job.image}: no statistics for label(s) {unreported}, writing NA")

            rows = build_stat_rows(
                job, stats, context.labels, kinds, include_label_image=include_label_image
            )
            writer.write_rows(rows)
            summary.n_images += 1

    return summary


def run_subject_space(jobs: Sequence[ImageJob], context: RunContext) -> RunSummary:
    """
    Compute statistics of each gray image over its own label image.

    The gray image's transform is copied onto its label image in memory before
    statistics are computed; images must truly be in the same space.
    Writes ``<root>Mean.csv``, ``SD``, ``Max``, ``Min``, ``Count`` and ``VolumeMM3``,
    each with columns ``Image,LabelImage,<label names>``.

    Parameters
    ----------
    jobs : sequence of ImageJob
        Gray/label image pairs, in output row order.
    context : RunContext
        Labels, engine and output settings.

    Returns
    -------
    RunSummary
    """
    context.console.section("SUBJECT SPACE LABEL STATISTICS")
    context.console.label_table(context.labels)

    summary = _process_jobs(
        jobs,
        context,
        SUBJECT_SPACE_KINDS,
        include_label_image=True,
        copy_transform=True,
    )

    context.console.success("Label statistics complete", details=summary.as_dict())
    return summary


def run_template_space(
    jobs: Sequence[ImageJob],
    context: RunContext,
    output_label_vols: bool = False,
) -> RunSummary:
    """
    Compute statistics of each gray image over a shared template label image.

    Writes ``<root>Mean.csv``, ``SD``, ``Max`` and ``Min`` with columns
    ``Image,<label names>``. With ``output_label_vols`` the label image's own
    voxel counts and volumes are written to ``<root>LabelImageCount.csv`` and
    ``<root>LabelImageVolumeMM3.csv``.

    Parameters
    ----------
    jobs : sequence of ImageJob
        Gray images paired with the template label image.
    context : RunContext
        Labels, engine and output settings.
    output_label_vols : bool, default=False
        Also run the label image self-statistics pass.

    Returns
    -------
    RunSummary
    """
    context.console.section("TEMPLATE SPACE LABEL STATISTICS")
    context.console.label_table(context.labels)

    summary = _process_jobs(
        jobs,
        context,
        TEMPLATE_INTENSITY_KINDS,
        include_label_image=False,
        copy_transform=False,
    )

    if output_label_vols:
        if not jobs:
            raise ValueError("Label image volumes need at least one job to find the label image")
        summary.output_files.extend(run_label_image_pass(jobs[0].label_image, context))

    context.console.success("Label statistics complete", details=summary.as_dict())
    return summary


def run_label_image_pass(label_image: ImageRef, context: RunContext) -> list[Path]:
    """
    Write voxel count and volume of each defined label of the label image.

    Produces one data row in ``<root>LabelImageCount.csv`` and
    ``<root>LabelImageVolumeMM3.csv``, headed ``Image,<label names>``.

    Returns
    -------
    list of Path
        The two files written.
    """
    context.console.info(f"Processing {label_image}")

    if label_image.is_absent:
        stats = {}
    else:
        stats = context.engine.compute_label_image(label_image.path)

    header = build_header(context.labels, include_label_image=False)
    with StatTableWriter(
        context.output_root, LABEL_IMAGE_KINDS, header, prefix=LABEL_IMAGE_PREFIX
    ) as writer:
        writer.write_rows(
            build_label_image_rows(
                label_image.identifier, stats, context.labels, LABEL_IMAGE_KINDS
            )
        )

    return list(writer.paths)
