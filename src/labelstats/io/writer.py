"""
Multi-file CSV writer for statistic tables.

One CSV file is kept open per statistic kind. All files receive the same
header and then one row per image, in processing order, so row N of every
file belongs to the same image.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import IO, Any

from labelstats.core.exceptions import FileAccessError, TableShapeError
from labelstats.core.kinds import StatKind

logger = logging.getLogger(__name__)


def stat_table_path(output_root: str | Path, kind: StatKind, prefix: str = "") -> Path:
    """
    Output file path for a statistic kind.

    The output root is a plain string prefix, not a directory:
    ``stat_table_path("out/study_", MEAN)`` is ``out/study_Mean.csv``.
    """
    return Path(f"{output_root}{prefix}{kind.name}.csv")


class StatTableWriter:
    """
    Writes synchronized statistic tables, one file per kind.

    Use as a context manager; files are opened and headed on entry and closed
    on exit. Rows already written stay on disk if the run fails.

    Parameters
    ----------
    output_root : str or Path
        Prefix of every output file path.
    kinds : sequence of StatKind
        Statistic kinds to write, one file each.
    header : sequence of str
        Header row written to every file.
    prefix : str, default=""
        Inserted between output root and kind name (e.g. "LabelImage").

    Examples
    --------
    >>> with StatTableWriter("out/study_", SUBJECT_SPACE_KINDS, header) as writer:
    ...     writer.write_rows(rows)
    >>> writer.paths[0]
    PosixPath('out/study_Mean.csv')
    """

    def __init__(
        self,
        output_root: str | Path,
        kinds: Sequence[StatKind],
        header: Sequence[str],
        prefix: str = "",
    ):
        self.output_root = str(output_root)
        self.kinds = tuple(kinds)
        self.header = list(header)
        self.prefix = prefix
        self.paths = [stat_table_path(self.output_root, kind, prefix) for kind in self.kinds]
        self.rows_written = 0
        self._files: dict[str, IO[str]] = {}
        self._writers: dict[str, Any] = {}

    @property
    def width(self) -> int:
        return len(self.header)

    def open(self) -> StatTableWriter:
        """
        Open every output file and write the header.

        Raises
        ------
        FileAccessError
            If an output file cannot be opened.
        """
        for kind, path in zip(self.kinds, self.paths):
            try:
                if path.parent != Path(""):
                    path.parent.mkdir(parents=True, exist_ok=True)
                f = open(path, "w", newline="", encoding="utf-8")
            except OSError as e:
                self.close()
                raise FileAccessError(f"Can't open output file {path}: {e}") from e

            self._files[kind.name] = f
            self._writers[kind.name] = csv.writer(f, lineterminator="\n")
            self._writers[kind.name].writerow(self.header)
            logger.debug(f"Opened {path}")

        return self

    def write_rows(self, rows: Mapping[str, Sequence[str]]) -> None:
        """
        Append one row to every file.

        Parameters
        ----------
        rows : Mapping[str, Sequence[str]]
            Row per kind name; must cover every kind of this writer.

        Raises
        ------
        TableShapeError
            If a kind is missing or a row's width differs from the header's.
        """
        if not self._writers:
            raise RuntimeError("StatTableWriter is not open")

        missing = [kind.name for kind in self.kinds if kind.name not in rows]
        if missing:
            raise TableShapeError(f"No row given for statistic kind(s): {', '.join(missing)}")

        for kind in self.kinds:
            row = rows[kind.name]
            if len(row) != self.width:
                raise TableShapeError(
                    f"{kind.name} row has {len(row)} columns, expected {self.width}: "
                    f"{row[0] if row else ''}"
                )

        for kind in self.kinds:
            self._writers[kind.name].writerow(rows[kind.name])

        self.rows_written += 1

    def close(self) -> None:
        """Close all open files."""
        for f in self._files.values():
            f.close()
        self._files.clear()
        self._writers.clear()

    def __enter__(self) -> StatTableWriter:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
