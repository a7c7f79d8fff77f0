"""Output tables: CSV writing and reading back with pandas."""

from labelstats.io.tables import load_stat_tables, read_stat_table
from labelstats.io.writer import StatTableWriter, stat_table_path

__all__ = [
    "StatTableWriter",
    "load_stat_tables",
    "read_stat_table",
    "stat_table_path",
]
