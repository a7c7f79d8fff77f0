"""Unit tests for label definition loading."""

from __future__ import annotations

import pytest

from labelstats.core.exceptions import FileAccessError, LabelDefinitionError
from labelstats.core.labels import LabelDictionary, load_label_definitions


class TestLabelDictionary:
    """Tests for LabelDictionary ordering and access."""

    def test_iterates_in_ascending_id_order(self):
        """Test that labels iterate by numeric ID regardless of insertion order."""
        labels = LabelDictionary({10: "ten", 2: "two", 0: "clear"})

        assert list(labels) == [0, 2, 10]
        assert labels.ids == (0, 2, 10)
        assert labels.names == ("clear", "two", "ten")

    def test_numeric_not_lexical_order(self):
        """Test that 10 sorts after 9."""
        labels = LabelDictionary({10: "a", 9: "b", 1: "c"})
        assert labels.ids == (1, 9, 10)

    def test_mapping_access(self):
        labels = LabelDictionary({1: "gray"})

        assert 1 in labels
        assert 2 not in labels
        assert labels[1] == "gray"
        assert len(labels) == 1
        assert list(labels.items()) == [(1, "gray")]


class TestLoadLabelDefinitions:
    """Tests for load_label_definitions."""

    def test_loads_file_sorted(self, label_def_csv):
        """Test that rows out of order load in ID order."""
        labels = load_label_definitions(label_def_csv)

        assert labels.ids == (0, 1, 2)
        assert labels.names == ("clear", "gray", "white")

    def test_header_is_discarded(self, tmp_path):
        """Test that the first row is skipped whatever its content."""
        path = tmp_path / "labels.csv"
        path.write_text("5,header-looking\n1,gray\n")

        labels = load_label_definitions(path)

        assert labels.ids == (1,)

    def test_header_only_gives_empty_dictionary(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\n")

        assert len(load_label_definitions(path)) == 0

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\n1,gray\n\n2,white\n\n")

        assert load_label_definitions(path).ids == (1, 2)

    def test_duplicate_id_last_wins(self, tmp_path):
        """Test that a redefined label keeps its last name."""
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\n1,first\n2,white\n1,second\n")

        labels = load_label_definitions(path)

        assert labels[1] == "second"
        assert labels.ids == (1, 2)

    def test_names_are_stripped(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\n 1 , gray matter \r\n")

        labels = load_label_definitions(path)

        assert labels[1] == "gray matter"

    def test_quoted_name_with_comma(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text('LabelId,LabelName\n1,"Hippocampus, left"\n')

        assert load_label_definitions(path)[1] == "Hippocampus, left"

    def test_missing_file_raises(self, tmp_path):
        """Test that an unreadable file raises FileAccessError."""
        with pytest.raises(FileAccessError, match="label definition"):
            load_label_definitions(tmp_path / "missing.csv")

    def test_row_without_name_raises(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\n1,gray\n2\n")

        with pytest.raises(LabelDefinitionError) as exc_info:
            load_label_definitions(path)

        assert exc_info.value.line_number == 3

    def test_non_integer_id_raises(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\nabc,gray\n")

        with pytest.raises(LabelDefinitionError, match="not an integer"):
            load_label_definitions(path)

    def test_negative_id_raises(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\n-1,gray\n")

        with pytest.raises(LabelDefinitionError, match="negative"):
            load_label_definitions(path)

    def test_error_message_names_file_and_line(self, tmp_path):
        path = tmp_path / "labels.csv"
        path.write_text("LabelId,LabelName\nx,gray\n")

        with pytest.raises(LabelDefinitionError) as exc_info:
            load_label_definitions(path)

        assert str(path) in str(exc_info.value)
        assert "line 2" in str(exc_info.value)
