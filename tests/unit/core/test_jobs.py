"""Unit tests for image list resolution and job construction."""

from __future__ import annotations

from pathlib import Path

import pytest

from labelstats.core.exceptions import FileAccessError, ImageListMismatchError, UsageError
from labelstats.core.jobs import (
    ImageJob,
    ImageRef,
    build_subject_jobs,
    build_template_jobs,
    read_image_list,
    resolve_image_list,
)


class TestImageRef:
    """Tests for ImageRef parsing."""

    def test_parse_path(self):
        ref = ImageRef.parse("/data/sub-01.nii.gz")

        assert not ref.is_absent
        assert ref.path == Path("/data/sub-01.nii.gz")
        assert ref.identifier == "/data/sub-01.nii.gz"

    def test_parse_absent_token(self):
        """Test that the literal NA marks an absent image."""
        ref = ImageRef.parse("NA")

        assert ref.is_absent
        assert ref.identifier == "NA"
        assert str(ref) == "NA"

    def test_absent_token_is_case_sensitive(self):
        assert not ImageRef.parse("na").is_absent

    def test_parse_trims_line_endings(self):
        assert ImageRef.parse("img.nii.gz\r\n").identifier == "img.nii.gz"
        assert ImageRef.parse("NA\n").is_absent

    def test_absent_has_no_path(self):
        with pytest.raises(ValueError):
            ImageRef.absent().path


class TestImageJob:
    """Tests for ImageJob absence."""

    def test_absent_when_either_member_absent(self):
        present = ImageRef.parse("a.nii.gz")
        absent = ImageRef.absent()

        assert not ImageJob(present, present).is_absent
        assert ImageJob(absent, present).is_absent
        assert ImageJob(present, absent).is_absent


class TestReadImageList:
    """Tests for reading list files."""

    def test_preserves_order_and_skips_blank_lines(self, tmp_path):
        path = tmp_path / "images.txt"
        path.write_text("b.nii.gz\n\na.nii.gz\r\nNA\n")

        assert read_image_list(path) == ["b.nii.gz", "a.nii.gz", "NA"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileAccessError, match="image list"):
            read_image_list(tmp_path / "missing.txt")


class TestResolveImageList:
    """Tests for resolve_image_list."""

    def test_inline(self):
        refs = resolve_image_list(["a.nii.gz", "NA"])

        assert [r.identifier for r in refs] == ["a.nii.gz", "NA"]
        assert refs[1].is_absent

    def test_list_file_overrides_inline(self, tmp_path):
        """Test that a list file wins when both sources are given."""
        path = tmp_path / "images.txt"
        path.write_text("from_file.nii.gz\n")

        refs = resolve_image_list(["inline.nii.gz"], path)

        assert [r.identifier for r in refs] == ["from_file.nii.gz"]

    def test_empty_raises_usage_error(self):
        with pytest.raises(UsageError, match="No label images specified"):
            resolve_image_list([], None, what="label images")

    def test_empty_list_file_raises_usage_error(self, tmp_path):
        path = tmp_path / "images.txt"
        path.write_text("\n\n")

        with pytest.raises(UsageError):
            resolve_image_list(None, path)


class TestBuildJobs:
    """Tests for subject and template job construction."""

    def test_subject_jobs_pair_positionally(self):
        images = resolve_image_list(["g1", "g2"])
        label_images = resolve_image_list(["l1", "l2"])

        jobs = build_subject_jobs(images, label_images)

        assert [(j.image.identifier, j.label_image.identifier) for j in jobs] == [
            ("g1", "l1"),
            ("g2", "l2"),
        ]

    def test_subject_jobs_length_mismatch(self):
        """Test that unequal lists are rejected rather than silently truncated."""
        images = resolve_image_list(["g1", "g2", "g3"])
        label_images = resolve_image_list(["l1", "l2"])

        with pytest.raises(ImageListMismatchError) as exc_info:
            build_subject_jobs(images, label_images)

        assert exc_info.value.n_images == 3
        assert exc_info.value.n_label_images == 2
        assert isinstance(exc_info.value, UsageError)

    def test_template_jobs_share_label_image(self):
        images = resolve_image_list(["g1", "NA", "g3"])
        template = ImageRef.parse("template_labels.nii.gz")

        jobs = build_template_jobs(images, template)

        assert len(jobs) == 3
        assert all(j.label_image == template for j in jobs)
        assert jobs[1].is_absent
