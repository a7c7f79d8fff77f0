"""Label definition loading.

A label definition table is a CSV file with a header row followed by
``labelID,labelName`` rows::

    LabelId,LabelName
    0,clear
    1,someLabel
    2,someOtherLabel

Only labels defined here become output columns. Labels present in an image
but missing from the definition table are ignored.

Examples
--------
>>> from labelstats.core.labels import load_label_definitions
>>> labels = load_label_definitions("labelDefinition.csv")
>>> labels.ids
(0, 1, 2)
>>> labels.names
('clear', 'someLabel', 'someOtherLabel')
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from labelstats.core.exceptions import FileAccessError, LabelDefinitionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelDictionary:
    """Ordered, read-only mapping from label ID to label name.

    Iteration is in ascending numeric label ID order. The order is fixed when
    the dictionary is built and every output column follows it.

    Attributes
    ----------
    labels : Mapping[int, str]
        Label ID to label name.
    """

    labels: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ordered = {label_id: self.labels[label_id] for label_id in sorted(self.labels)}
        object.__setattr__(self, "labels", ordered)

    @property
    def ids(self) -> tuple[int, ...]:
        """Label IDs in ascending order."""
        return tuple(self.labels)

    @property
    def names(self) -> tuple[str, ...]:
        """Label names, in label ID order."""
        return tuple(self.labels.values())

    def __len__(self) -> int:
        return len(self.labels)

    def __iter__(self) -> Iterator[int]:
        return iter(self.labels)

    def __contains__(self, label_id: object) -> bool:
        return label_id in self.labels

    def __getitem__(self, label_id: int) -> str:
        return self.labels[label_id]

    def items(self):
        return self.labels.items()


def load_label_definitions(path: str | Path) -> LabelDictionary:
    """Load a label definition table.

    The first row is a header and is discarded. Every following row must hold
    an integer label ID and a label name. When a label ID occurs more than
    once, the last row wins. Blank lines are skipped.

    Parameters
    ----------
    path : str or Path
        Path to the label definition CSV file.

    Returns
    -------
    LabelDictionary
        Labels in ascending ID order.

    Raises
    ------
    FileAccessError
        If the file cannot be opened.
    LabelDefinitionError
        If a row has no name column or a non-integer label ID.
    """
    path = Path(path)

    try:
        f = open(path, newline="", encoding="utf-8")
    except OSError as e:
        raise FileAccessError(f"Can't open label definition file {path}: {e}") from e

    labels: dict[int, str] = {}
    with f:
        reader = csv.reader(f)
        # Header row
        next(reader, None)

        for row in reader:
            line_number = reader.line_num
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) < 2:
                raise LabelDefinitionError(
                    path, line_number, f"expected 'labelID,labelName', got {','.join(row)!r}"
                )

            try:
                label_id = int(row[0].strip())
            except ValueError as e:
                raise LabelDefinitionError(
                    path, line_number, f"label ID {row[0]!r} is not an integer"
                ) from e
            if label_id < 0:
                raise LabelDefinitionError(path, line_number, f"label ID {label_id} is negative")

            name = row[1].strip()
            if label_id in labels:
                logger.debug(
                    f"Label {label_id} redefined on line {line_number}: "
                    f"{labels[label_id]!r} -> {name!r}"
                )
            labels[label_id] = name

    return LabelDictionary(labels)
