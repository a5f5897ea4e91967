"""Vendor export ingestion."""

from swing_scoring.ingestion.csv_parser import (
    ImportResult,
    ParseResult,
    SwingCSVParser,
    hit_type_from_angle,
    normalize_header,
    parse_csv,
    parse_files,
)

__all__ = [
    "ImportResult",
    "ParseResult",
    "SwingCSVParser",
    "hit_type_from_angle",
    "normalize_header",
    "parse_csv",
    "parse_files",
]
