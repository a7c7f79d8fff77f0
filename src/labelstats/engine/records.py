"""
Parsing of per-label statistics tables.

Engines report statistics as a text table in the layout of ``c3d -lstat``::

        LabelID        Mean        StdD         Max         Min       Count     Vol(mm^3)        Extent(Vox)
              0     0.00000     0.00000     0.00000     0.00000         900       900.000         10 10 10
              1   120.50000     3.20000   130.00000   110.00000          64        64.000          4 4 4

The first line is a header. Each following line is split on whitespace;
because the lines are right-aligned, the split starts with an empty field,
so the label ID lands at index 1, the mean at index 2, and so on.
Values are kept as the engine wrote them so they reach the CSV unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from labelstats.core.exceptions import EngineError

#: Fields required per line: leading blank, label ID, mean, sd, max, min, count, volume
MIN_FIELDS = 8

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class LabelStatRecord:
    """
    Statistics the engine reported for one label of one image.

    Attributes
    ----------
    label_id : int
        Label the statistics were computed over.
    mean, sd, max, min : str
        Intensity statistics, as formatted by the engine.
    count : str
        Number of voxels carrying the label.
    volume_mm3 : str
        Physical volume of the label in mm^3.
    fields : tuple of str
        Every positional field of the line, including engine-specific extras.
    """

    label_id: int
    mean: str
    sd: str
    max: str
    min: str
    count: str
    volume_mm3: str
    fields: tuple[str, ...]

    def field(self, index: int) -> str:
        """Return the positional field at ``index`` of the original line."""
        return self.fields[index]


def split_table_line(line: str) -> list[str]:
    """Split a table line into positional fields, keeping the leading blank."""
    return _WHITESPACE.split(line.rstrip())


def parse_stat_line(line: str, line_number: int | None = None) -> LabelStatRecord:
    """
    Parse one data line of a statistics table.

    Raises
    ------
    EngineError
        If the line has too few fields or a non-integer label ID.
    """
    fields = split_table_line(line)
    where = f" (line {line_number})" if line_number is not None else ""

    if len(fields) < MIN_FIELDS:
        raise EngineError(
            f"Malformed statistics line{where}: expected at least {MIN_FIELDS} fields, "
            f"got {len(fields)}: {line.strip()!r}"
        )

    try:
        label_id = int(fields[1])
    except ValueError:
        # Some engines print label values as floats, e.g. "3.0"
        try:
            value = float(fields[1])
        except ValueError as e:
            raise EngineError(
                f"Malformed statistics line{where}: label ID {fields[1]!r} is not a number"
            ) from e
        if not value.is_integer():
            raise EngineError(
                f"Malformed statistics line{where}: label ID {fields[1]!r} is not an integer"
            )
        label_id = int(value)

    return LabelStatRecord(
        label_id=label_id,
        mean=fields[2],
        sd=fields[3],
        max=fields[4],
        min=fields[5],
        count=fields[6],
        volume_mm3=fields[7],
        fields=tuple(fields),
    )


def parse_stat_table(text: str) -> dict[int, LabelStatRecord]:
    """
    Parse an engine statistics table into a lookup by label ID.

    Parameters
    ----------
    text : str
        Complete engine output, header line included.

    Returns
    -------
    dict[int, LabelStatRecord]
        One record per label the engine reported. A label reported twice keeps
        its last line.

    Raises
    ------
    EngineError
        If any data line fails validation.
    """
    records: dict[int, LabelStatRecord] = {}
    lines = text.splitlines()

    # lines[0] is the header
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        record = parse_stat_line(line, line_number)
        records[record.label_id] = record

    return records
