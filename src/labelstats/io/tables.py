"""
Reading statistic tables back for analysis.

Provides pandas loaders for the CSV files written by a labelstats run.
``NA`` cells become missing values; all other cells are parsed as numbers.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from labelstats.core.kinds import StatKind
from labelstats.core.reconcile import NA_TOKEN
from labelstats.io.writer import stat_table_path

#: Identifier columns; every other column holds one label's values
ID_COLUMNS = ("Image", "LabelImage")


def read_stat_table(path: str | Path) -> pd.DataFrame:
    """
    Load one statistic table.

    Parameters
    ----------
    path : str or Path
        CSV file written by labelstats.

    Returns
    -------
    pd.DataFrame
        One row per image, indexed by the image column (plus the label image
        column for subject-space tables); one column per label name.

    Raises
    ------
    FileNotFoundError
        If the table does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Statistic table not found: {path}")

    columns = pd.read_csv(path, nrows=0).columns
    index_columns = [c for c in ID_COLUMNS if c in columns]

    # An absent image is also written as NA; only label cells become missing values
    df = pd.read_csv(
        path,
        keep_default_na=False,
        na_values={c: [NA_TOKEN] for c in columns if c not in index_columns},
        dtype={c: str for c in index_columns},
    )
    return df.set_index(index_columns)


def load_stat_tables(
    output_root: str | Path,
    kinds: Sequence[StatKind],
    prefix: str = "",
) -> dict[str, pd.DataFrame]:
    """
    Load the tables of a run, keyed by statistic kind name.

    Examples
    --------
    >>> from labelstats.core.kinds import TEMPLATE_INTENSITY_KINDS
    >>> tables = load_stat_tables("out/study_", TEMPLATE_INTENSITY_KINDS)
    >>> tables["Mean"].loc["sub-01.nii.gz", "gray"]
    """
    return {
        kind.name: read_stat_table(stat_table_path(output_root, kind, prefix)) for kind in kinds
    }
