"""
In-process statistics engine using nibabel and numpy.

Produces the same per-label table as ``c3d -lstat`` without an external
tool, so runs and tests work where c3d is not installed.
"""

from __future__ import annotations

import logging
from pathlib import Path

import nibabel as nib
import numpy as np

from labelstats.core.exceptions import EngineError
from labelstats.engine.base import StatsEngine

logger = logging.getLogger(__name__)

TABLE_HEADER = (
    "    LabelID        Mean        StdD         Max         Min       Count"
    "     Vol(mm^3)        Extent(Vox)"
)


def _load_volume(path: Path) -> nib.Nifti1Image:
    """Load a 3D image, dropping trailing singleton dimensions."""
    if not Path(path).exists():
        raise EngineError(f"Image file not found: {path}")
    try:
        img = nib.load(str(path))
    except Exception as e:
        raise EngineError(f"Failed to load image {path}: {e}") from e

    if img.ndim > 3:
        if any(size != 1 for size in img.shape[3:]):
            raise EngineError(f"Expected a 3D image, got shape {img.shape}: {path}")
        img = nib.Nifti1Image(np.asarray(img.dataobj).reshape(img.shape[:3]), img.affine, img.header)
    return img


def _voxel_volume(img: nib.Nifti1Image) -> float:
    """Volume of one voxel in mm^3."""
    return float(np.prod(img.header.get_zooms()[:3]))


def format_stat_table(
    gray: np.ndarray, labels: np.ndarray, voxel_volume_mm3: float
) -> str:
    """
    Compute per-label statistics and format them as a ``-lstat`` table.

    Every label value present in ``labels`` gets a line, background included.
    The standard deviation is the sample standard deviation (0 for a single voxel).

    Parameters
    ----------
    gray : np.ndarray
        Gray intensities, already scaled.
    labels : np.ndarray of int
        Label values, same shape as ``gray``.
    voxel_volume_mm3 : float
        Volume of one voxel in mm^3.

    Returns
    -------
    str
        Table text, header line first, one line per label in ascending order.
    """
    lines = [TABLE_HEADER]

    for label_id in np.unique(labels):
        in_label = labels == label_id
        values = gray[in_label]
        count = int(values.size)
        sd = float(np.std(values, ddof=1)) if count > 1 else 0.0

        coords = np.nonzero(in_label)
        extent = " ".join(str(int(c.max() - c.min() + 1)) for c in coords)

        lines.append(
            f"{int(label_id):>11d} {float(values.mean()):>11.5f} {sd:>11.5f} "
            f"{float(values.max()):>11.5f} {float(values.min()):>11.5f} {count:>11d} "
            f"{count * voxel_volume_mm3:>13.3f}         {extent}"
        )

    return "\n".join(lines) + "\n"


class NibabelEngine(StatsEngine):
    """
    Statistics engine computing label statistics in memory.

    Images must share a voxel grid. With ``copy_transform`` the gray image's
    voxel geometry is used for volumes, matching c3d's ``-copy-transform``;
    otherwise the label image's geometry is used.
    """

    name = "native"

    def label_stats_table(
        self,
        image: Path,
        label_image: Path,
        scale: float = 1.0,
        copy_transform: bool = False,
    ) -> str:
        gray_img = _load_volume(image)
        label_img = _load_volume(label_image)

        if gray_img.shape != label_img.shape:
            raise EngineError(
                f"Image dimensions do not match: {image} {gray_img.shape} vs "
                f"{label_image} {label_img.shape}"
            )

        gray = gray_img.get_fdata() * scale
        labels = np.rint(label_img.get_fdata()).astype(np.int64)

        geometry = gray_img if copy_transform else label_img
        logger.debug(f"Computing label statistics for {image} over {label_image}")
        return format_stat_table(gray, labels, _voxel_volume(geometry))

    def label_image_table(self, label_image: Path) -> str:
        label_img = _load_volume(label_image)
        data = label_img.get_fdata()
        labels = np.rint(data).astype(np.int64)
        return format_stat_table(data, labels, _voxel_volume(label_img))
