"""Image list resolution and job construction.

Gray images (and, in subject space, label images) are given either inline or
through a list file with one entry per line. The literal ``NA`` marks an image
that is intentionally absent: no statistics are computed for it and its output
row holds ``NA`` in every label column.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from labelstats.core.exceptions import FileAccessError, ImageListMismatchError, UsageError

logger = logging.getLogger(__name__)

#: Token marking an intentionally absent image in image lists
ABSENT_TOKEN = "NA"


@dataclass(frozen=True)
class ImageRef:
    """Reference to an image that is either present on disk or absent.

    Attributes
    ----------
    text : str or None
        Image path exactly as given by the user, or None when absent.
    """

    text: str | None

    @classmethod
    def parse(cls, token: str) -> ImageRef:
        """Build a reference from an image list entry."""
        token = token.rstrip("\r\n")
        if token == ABSENT_TOKEN:
            return cls.absent()
        return cls(token)

    @classmethod
    def absent(cls) -> ImageRef:
        return cls(None)

    @property
    def is_absent(self) -> bool:
        return self.text is None

    @property
    def path(self) -> Path:
        if self.text is None:
            raise ValueError("Absent image has no path")
        return Path(self.text)

    @property
    def identifier(self) -> str:
        """Text written to the identifier columns of output rows."""
        return ABSENT_TOKEN if self.text is None else self.text

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class ImageJob:
    """A gray image paired with the label image its statistics are taken over."""

    image: ImageRef
    label_image: ImageRef

    @property
    def is_absent(self) -> bool:
        """True when either member is absent and no statistics can be computed."""
        return self.image.is_absent or self.label_image.is_absent


def read_image_list(list_path: str | Path) -> list[str]:
    """
    Read a newline-delimited image list file.

    Line endings are trimmed; blank lines are skipped. Order is preserved.

    Raises
    ------
    FileAccessError
        If the list file cannot be opened.
    """
    list_path = Path(list_path)
    try:
        with open(list_path, encoding="utf-8") as f:
            entries = [line.rstrip("\r\n") for line in f]
    except OSError as e:
        raise FileAccessError(f"Can't open image list {list_path} for read: {e}") from e

    return [entry for entry in entries if entry.strip()]


def resolve_image_list(
    inline: Sequence[str] | None = None,
    list_file: str | Path | None = None,
    what: str = "input images",
) -> list[ImageRef]:
    """
    Resolve an image list from inline values or a list file.

    The list file takes precedence over inline values when both are given.

    Parameters
    ----------
    inline : sequence of str, optional
        Image references given directly (e.g. repeated ``--image`` values).
    list_file : str or Path, optional
        Newline-delimited file of image references.
    what : str
        Description used in the error message.

    Returns
    -------
    list of ImageRef
        References in input order.

    Raises
    ------
    UsageError
        If the resolved list is empty.
    FileAccessError
        If the list file cannot be opened.
    """
    if list_file is not None:
        if inline:
            logger.debug(f"List file {list_file} overrides {len(inline)} inline {what}")
        entries = read_image_list(list_file)
    else:
        entries = [entry.rstrip("\r\n") for entry in (inline or [])]

    if not entries:
        raise UsageError(f"No {what} specified")

    return [ImageRef.parse(entry) for entry in entries]


def build_subject_jobs(
    images: Sequence[ImageRef], label_images: Sequence[ImageRef]
) -> list[ImageJob]:
    """
    Pair gray images with their own label images, positionally.

    Raises
    ------
    ImageListMismatchError
        If the two lists differ in length.
    """
    if len(images) != len(label_images):
        raise ImageListMismatchError(len(images), len(label_images))
    return [ImageJob(image, label_image) for image, label_image in zip(images, label_images)]


def build_template_jobs(images: Iterable[ImageRef], label_image: ImageRef) -> list[ImageJob]:
    """Pair every gray image with the single shared template label image."""
    return [ImageJob(image, label_image) for image in images]
