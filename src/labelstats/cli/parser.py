"""
labelstats CLI argument parser module.

Functions:
    build_parser: Build and return the argument parser.
"""

from __future__ import annotations

from argparse import ArgumentParser, RawDescriptionHelpFormatter, _SubParsersAction
from pathlib import Path

SUBJECT_DESCRIPTION = """\
Compute statistics of gray images within labeled regions, where each image
has its own label image, and write them as CSV files.

There must be a common definition of the labels: label N must be the same
thing in each image. Labels missing from an image produce NA.

The transform of each gray image is copied to its label image at run time
to avoid problems with NIfTI header precision. The image on disk is not
modified, so there is no warning if the images are not aligned: each label
image must be in the same space as its gray image.
"""

TEMPLATE_DESCRIPTION = """\
Compute statistics of gray images within the regions of a single template
label image, and write them as CSV files.

All images must exist in a common space with identical voxel and physical
extents.
"""

SCALE_HELP = (
    "Scaling factor applied to the gray images before statistics are computed. "
    "c3d writes limited precision: a mean diffusivity of 7.8489E-4 mm^2/s is "
    "written as 0.00078, scaling by 1000 records 0.78489 mm^2/ms. "
    "The original data is not modified (default: 1.0)"
)


def _add_common_arguments(parser: ArgumentParser) -> None:
    g_input = parser.add_argument_group("Input")
    g_input.add_argument(
        "--image",
        dest="images",
        nargs="+",
        action="extend",
        metavar="IMAGE",
        help="Gray image file name(s). Use NA for an image that is intentionally missing.",
    )
    g_input.add_argument(
        "--image-list",
        type=Path,
        metavar="FILE",
        help="Text file containing gray images to process, one per line. Overrides --image.",
    )
    g_input.add_argument(
        "--label-def",
        type=Path,
        metavar="CSV",
        help=(
            "CSV file of label definitions with header 'LabelId,LabelName'. "
            "Statistics are only written for defined labels."
        ),
    )

    g_output = parser.add_argument_group("Output")
    g_output.add_argument(
        "--output-root",
        metavar="ROOT",
        help="Root for output files, e.g. 'stats/study_' writes stats/study_Mean.csv",
    )

    g_stats = parser.add_argument_group("Statistics options")
    g_stats.add_argument("--scale", type=float, metavar="FACTOR", help=SCALE_HELP)
    g_stats.add_argument(
        "--engine",
        choices=["c3d", "native"],
        help="Statistics engine: c3d subprocess or in-process nibabel (default: c3d)",
    )
    g_stats.add_argument(
        "--c3d-executable",
        metavar="PATH",
        help="c3d executable to run (default: c3d on PATH)",
    )
    g_stats.add_argument(
        "--engine-timeout",
        type=float,
        metavar="SECONDS",
        help="Give up on an engine invocation after this many seconds (default: no limit)",
    )

    g_other = parser.add_argument_group("Other options")
    g_other.add_argument(
        "-c",
        "--config",
        type=Path,
        metavar="YAML",
        help=(
            "Path to YAML configuration file. Use 'labelstats --generate-config' "
            "to create a template. Command-line options override config file."
        ),
    )
    g_other.add_argument(
        "--progress",
        dest="show_progress",
        action="store_true",
        default=None,
        help="Show a progress bar over images",
    )
    g_other.add_argument(
        "-v",
        "--verbose",
        dest="verbose_count",
        action="count",
        default=0,
        help="Increase verbosity (-v=INFO, -vv=DEBUG)",
    )


def build_parser(prog: str | None = None) -> ArgumentParser:
    """
    Build the CLI argument parser.

    Parameters
    ----------
    prog : str, optional
        Program name for help text. Defaults to 'labelstats'.

    Returns
    -------
    ArgumentParser
        Parser with ``subject`` and ``template`` sub-commands.
    """
    from labelstats import __version__

    parser = ArgumentParser(
        prog=prog or "labelstats",
        description=f"labelstats: label statistics tables v{__version__}",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"labelstats {__version__}",
    )
    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Print a template configuration file to stdout and exit",
    )

    subparsers = parser.add_subparsers(dest="mode", metavar="{subject,template}")

    subject = subparsers.add_parser(
        "subject",
        help="Each gray image has its own label image",
        description=SUBJECT_DESCRIPTION,
        formatter_class=RawDescriptionHelpFormatter,
    )
    _add_common_arguments(subject)
    g_labels = subject.add_argument_group("Label images")
    g_labels.add_argument(
        "--label-image",
        dest="label_images",
        nargs="+",
        action="extend",
        metavar="IMAGE",
        help="Label image(s), in the same order as the gray images.",
    )
    g_labels.add_argument(
        "--label-image-list",
        type=Path,
        metavar="FILE",
        help="Text file containing label images, one per line, in gray image order.",
    )

    template = subparsers.add_parser(
        "template",
        help="All gray images share one template label image",
        description=TEMPLATE_DESCRIPTION,
        formatter_class=RawDescriptionHelpFormatter,
    )
    _add_common_arguments(template)
    g_template = template.add_argument_group("Label image")
    g_template.add_argument(
        "--label-image",
        dest="label_image",
        metavar="IMAGE",
        help="Template label image containing non-negative integer labels.",
    )
    g_template.add_argument(
        "--output-label-vols",
        type=int,
        nargs="?",
        const=1,
        metavar="N",
        help="Also write voxel count and volume of each label of the label image (non-zero enables)",
    )

    return parser


def get_subparser(parser: ArgumentParser, mode: str) -> ArgumentParser:
    """Return the sub-command parser for ``mode`` ("subject" or "template")."""
    for action in parser._actions:
        if isinstance(action, _SubParsersAction):
            return action.choices[mode]
    raise KeyError(f"No sub-command '{mode}'")
