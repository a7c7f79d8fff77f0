"""Unit tests for row reconciliation against the label dictionary."""

from __future__ import annotations

import pytest

from labelstats.core.jobs import ImageJob, ImageRef
from labelstats.core.kinds import (
    ALL_KINDS,
    COUNT,
    LABEL_IMAGE_KINDS,
    MEAN,
    SD,
    TEMPLATE_INTENSITY_KINDS,
)
from labelstats.core.reconcile import (
    NA_TOKEN,
    build_header,
    build_label_image_rows,
    build_stat_rows,
    row_width,
)
from labelstats.engine.records import parse_stat_line


def make_record(label_id, mean="0.5", sd="0.1", count="5"):
    return parse_stat_line(f"  {label_id}  {mean}  {sd}  1.0  0.0  {count}  5.000  1 1 1")


@pytest.fixture
def job():
    return ImageJob(ImageRef.parse("img.nii.gz"), ImageRef.parse("labelmap.nii.gz"))


class TestHeader:
    """Tests for header construction."""

    def test_subject_header(self, labels):
        assert build_header(labels, include_label_image=True) == [
            "Image",
            "LabelImage",
            "clear",
            "gray",
            "white",
        ]

    def test_template_header(self, labels):
        assert build_header(labels, include_label_image=False) == [
            "Image",
            "clear",
            "gray",
            "white",
        ]

    def test_row_width(self, labels):
        assert row_width(labels, include_label_image=True) == 5
        assert row_width(labels, include_label_image=False) == 4


class TestBuildStatRows:
    """Tests for build_stat_rows."""

    def test_missing_labels_are_na(self, job, labels):
        """Test the row for an image reporting only label 1."""
        rows = build_stat_rows(job, {1: make_record(1)}, labels, (MEAN,), include_label_image=True)

        assert rows["Mean"] == ["img.nii.gz", "labelmap.nii.gz", "NA", "0.5", "NA"]

    def test_undefined_labels_dropped(self, job, labels):
        """Test that labels outside the dictionary never reach a row."""
        stats = {1: make_record(1), 7: make_record(7, mean="99")}

        rows = build_stat_rows(job, stats, labels, (MEAN,), include_label_image=False)

        assert rows["Mean"] == ["img.nii.gz", "NA", "0.5", "NA"]
        assert "99" not in rows["Mean"]

    def test_one_row_per_kind(self, job, labels):
        stats = {0: make_record(0), 1: make_record(1, sd="0.2", count="12")}

        rows = build_stat_rows(job, stats, labels, ALL_KINDS, include_label_image=True)

        assert set(rows) == {kind.name for kind in ALL_KINDS}
        assert rows[SD.name][2:] == ["0.1", "0.2", NA_TOKEN]
        assert rows[COUNT.name][2:] == ["5", "12", NA_TOKEN]

    @pytest.mark.parametrize("include_label_image", [True, False])
    def test_every_row_has_table_width(self, job, labels, include_label_image):
        stats = {2: make_record(2), 50: make_record(50)}

        rows = build_stat_rows(job, stats, labels, ALL_KINDS, include_label_image)

        for row in rows.values():
            assert len(row) == row_width(labels, include_label_image)

    def test_absent_job_is_all_na(self, labels):
        """Test that an absent image yields NA in every label column."""
        job = ImageJob(ImageRef.absent(), ImageRef.parse("labels.nii.gz"))

        rows = build_stat_rows(job, {}, labels, TEMPLATE_INTENSITY_KINDS, include_label_image=False)

        for row in rows.values():
            assert row == ["NA", "NA", "NA", "NA"]

    def test_absent_label_image_identifier(self, labels):
        job = ImageJob(ImageRef.parse("img.nii.gz"), ImageRef.absent())

        rows = build_stat_rows(job, {}, labels, (MEAN,), include_label_image=True)

        assert rows["Mean"] == ["img.nii.gz", "NA", "NA", "NA", "NA"]

    def test_values_are_copied_verbatim(self, job, labels):
        """Test that engine text is not reformatted."""
        stats = {1: make_record(1, mean="0.00078")}

        rows = build_stat_rows(job, stats, labels, (MEAN,), include_label_image=False)

        assert rows["Mean"][2] == "0.00078"


class TestLabelImageRows:
    """Tests for label image self-statistics rows."""

    def test_rows_use_image_identifier_only(self, labels):
        stats = {1: make_record(1, count="32"), 2: make_record(2, count="16")}

        rows = build_label_image_rows(
            "template.nii.gz", stats, labels, LABEL_IMAGE_KINDS
        )

        assert rows["Count"] == ["template.nii.gz", "NA", "32", "16"]
        assert rows["VolumeMM3"] == ["template.nii.gz", "NA", "5.000", "5.000"]


class TestKinds:
    """Tests for the statistic kind table."""

    def test_kind_order(self):
        assert [k.name for k in ALL_KINDS] == ["Mean", "SD", "Max", "Min", "Count", "VolumeMM3"]

    def test_field_indices_follow_table_layout(self):
        assert [k.field_index for k in ALL_KINDS] == [2, 3, 4, 5, 6, 7]
