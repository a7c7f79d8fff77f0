"""
Shared test fixtures for labelstats tests.

Provides label definitions, synthetic NIfTI images, and a fake statistics
engine returning canned ``-lstat`` tables.
"""

import logging
import shutil

import nibabel as nib
import numpy as np
import pytest

from labelstats.core.labels import LabelDictionary
from labelstats.engine.base import StatsEngine
from labelstats.utils.logging import CONSOLE_LOGGER_NAME

LSTAT_HEADER = (
    "    LabelID        Mean        StdD         Max         Min       Count"
    "     Vol(mm^3)        Extent(Vox)"
)


def _check_c3d_available():
    """Check if c3d is available for tests."""
    return shutil.which("c3d") is not None


_C3D_AVAILABLE = None


def pytest_configure(config):
    """Cache availability checks at pytest startup."""
    global _C3D_AVAILABLE
    _C3D_AVAILABLE = _check_c3d_available()


def pytest_collection_modifyitems(config, items):
    """Skip tests that require unavailable dependencies."""
    for item in items:
        if "requires_c3d" in [m.name for m in item.iter_markers()]:
            if not _C3D_AVAILABLE:
                item.add_marker(pytest.mark.skip(reason="c3d not available"))


@pytest.fixture(autouse=True)
def _reset_console_logging():
    """Undo handler changes made by CLI runs so caplog sees console messages."""
    root_level = logging.getLogger().level
    yield
    console = logging.getLogger(CONSOLE_LOGGER_NAME)
    for handler in list(console.handlers):
        if getattr(handler, "_labelstats_console", False):
            console.removeHandler(handler)
    console.propagate = True
    logging.getLogger().setLevel(root_level)


def format_lstat_table(rows):
    """
    Format rows as a c3d ``-lstat`` table.

    Parameters
    ----------
    rows : list of tuple
        (label, mean, sd, max, min, count, volume) per label.
    """
    lines = [LSTAT_HEADER]
    for label, mean, sd, vmax, vmin, count, volume in rows:
        lines.append(
            f"{label:>11d} {mean:>11.5f} {sd:>11.5f} {vmax:>11.5f} {vmin:>11.5f} "
            f"{count:>11d} {volume:>13.3f}         1 1 1"
        )
    return "\n".join(lines) + "\n"


class FakeEngine(StatsEngine):
    """Engine returning canned tables keyed by image path, recording every call."""

    name = "fake"

    def __init__(self, tables=None, label_image_tables=None):
        self.tables = tables or {}
        self.label_image_tables = label_image_tables or {}
        self.calls = []

    def label_stats_table(self, image, label_image, scale=1.0, copy_transform=False):
        self.calls.append((str(image), str(label_image), scale, copy_transform))
        return self.tables[str(image)]

    def label_image_table(self, label_image):
        self.calls.append((str(label_image),))
        return self.label_image_tables[str(label_image)]


@pytest.fixture
def lstat_table():
    """Return a function formatting rows as an ``-lstat`` table."""
    return format_lstat_table


@pytest.fixture
def fake_engine():
    """Create an empty FakeEngine; fill ``tables`` per test."""
    return FakeEngine()


@pytest.fixture
def labels():
    """Label dictionary with background, gray and white matter."""
    return LabelDictionary({0: "clear", 1: "gray", 2: "white"})


@pytest.fixture
def label_def_csv(tmp_path):
    """Label definition file matching the ``labels`` fixture, rows out of order."""
    path = tmp_path / "labels.csv"
    path.write_text("LabelId,LabelName\n2,white\n0,clear\n1,gray\n")
    return path


@pytest.fixture
def synthetic_label_img():
    """
    Create a 4x4x4 label image with 1mm voxels.

    Labels: 1 in x=0..1 (32 voxels), 2 in x=2 (16 voxels), 0 in x=3 (16 voxels).
    """
    data = np.zeros((4, 4, 4), dtype=np.int16)
    data[0:2] = 1
    data[2] = 2
    return nib.Nifti1Image(data, np.eye(4))


@pytest.fixture
def synthetic_gray_img():
    """
    Create a 4x4x4 gray image matching ``synthetic_label_img``.

    Intensity 10 in label 1, 20 in label 2, 0 in background.
    """
    data = np.zeros((4, 4, 4), dtype=np.float32)
    data[0:2] = 10.0
    data[2] = 20.0
    return nib.Nifti1Image(data, np.eye(4))


@pytest.fixture
def image_files(tmp_path, synthetic_gray_img, synthetic_label_img):
    """Save the synthetic gray and label images; return their paths."""
    gray_path = tmp_path / "sub-01_gray.nii.gz"
    label_path = tmp_path / "sub-01_labels.nii.gz"
    nib.save(synthetic_gray_img, gray_path)
    nib.save(synthetic_label_img, label_path)
    return gray_path, label_path
