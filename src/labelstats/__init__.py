"""
labelstats - per-label intensity statistics tables for image cohorts.

Computes mean, SD, max, min, voxel count and volume of gray images within the
labels of label images, and tabulates them into one CSV file per statistic
with one row per image and one column per defined label.
"""

try:
    from ._version import __version__
except ImportError:
    # Fallback for development installations without setuptools-scm
    __version__ = "0.0.0+unknown"

from .core.jobs import ImageJob, ImageRef
from .core.labels import LabelDictionary, load_label_definitions
from .core.pipeline import RunContext, RunSummary, run_subject_space, run_template_space

__all__ = [
    "__version__",
    "ImageJob",
    "ImageRef",
    "LabelDictionary",
    "RunContext",
    "RunSummary",
    "load_label_definitions",
    "run_subject_space",
    "run_template_space",
]
