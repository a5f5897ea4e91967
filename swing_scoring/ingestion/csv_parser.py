"""Parser for vendor batted-ball CSV exports."""

import io
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from swing_scoring.exceptions import EmptyInputError, PartialParseWarning
from swing_scoring.records.models import HitType, SwingOutcome, SwingRecord
from swing_scoring.settings import HIT_TYPE_BANDS

logger = logging.getLogger(__name__)

# A source is a file path, or a (name, csv_text) pair for in-memory exports
Source = Union[str, Path, Tuple[str, str]]

NUMERIC_COLUMNS = ("swing_number", "exit_velocity", "launch_angle", "distance")


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing one vendor export.

    Attributes:
        source: File name the records came from.
        records: Valid swings in file order.
        skipped_rows: Malformed rows that were dropped.
        columns: Canonical field for each recognized header.
        warning: Set when at least one row was skipped.
    """
    source: str
    records: Tuple[SwingRecord, ...]
    skipped_rows: int = 0
    columns: Dict[str, str] = field(default_factory=dict)
    warning: Optional[PartialParseWarning] = None

    @property
    def partial(self) -> bool:
        return self.skipped_rows > 0


@dataclass(frozen=True)
class ImportResult:
    """
    Combined outcome of a multi-file import.

    Attributes:
        records: Swings from every successful file, sorted by swing number.
        files: Per-file results in the order the sources were given.
        failed_files: Error message for each file that produced no swings.
    """
    records: Tuple[SwingRecord, ...]
    files: Tuple[ParseResult, ...]
    failed_files: Dict[str, str] = field(default_factory=dict)

    @property
    def warnings(self) -> List[PartialParseWarning]:
        return [f.warning for f in self.files if f.warning is not None]

    @property
    def skipped_rows(self) -> int:
        return sum(f.skipped_rows for f in self.files)


def normalize_header(header: str) -> str:
    """
    Normalize a vendor column header for alias lookup.

    "Exit_Velo" and "exit-velo" both become "exit velo"; "Swing #" keeps
    its "#".
    """
    text = str(header).strip().lower()
    text = re.sub(r"[^a-z0-9#\s_\-.]", "", text)
    text = re.sub(r"[\s_\-.]+", " ", text)
    return text.strip()


FIELD_OPENING_QUOTE = re.compile(r'(?:^|,)\s*"')


def drop_unterminated_quotes(text: str) -> Tuple[str, int]:
    """
    Remove data lines whose opening quote is never closed.

    A quoted cell may span several physical lines, but a quote that stays
    open to the end of the file would swallow every row after it into one
    cell. Such a line is dropped and scanning resumes on the next line.

    Args:
        text: Raw CSV content including the header row.

    Returns:
        Tuple of (cleaned text, number of dropped lines).
    """
    lines = text.splitlines()
    if len(lines) < 2:
        return text, 0

    kept = [lines[0]]
    dropped = 0
    start = 1
    while start < len(lines):
        end = start
        quotes = lines[start].count('"')
        # quotes inside an unquoted cell are literal
        if not FIELD_OPENING_QUOTE.search(lines[start]):
            quotes = 0
        while quotes % 2 and end + 1 < len(lines):
            end += 1
            quotes += lines[end].count('"')

        if quotes % 2:
            logger.debug(f"Unterminated quote on line {start + 1}, dropping it")
            dropped += 1
            start += 1
            continue

        kept.extend(lines[start:end + 1])
        start = end + 1

    if not dropped:
        return text, 0
    return "\n".join(kept) + "\n", dropped


class SwingCSVParser:
    """
    Converts vendor batted-ball exports into SwingRecord sequences.

    Headers are matched case-insensitively against COLUMN_ALIASES. Numeric
    cells that do not parse become None; a row is skipped only when it holds
    no usable swing number, measurement or result at all.
    """

    COLUMN_ALIASES = {
        "swing_number": ("#", "swing", "swing #", "swing number", "swing no", "no"),
        "exit_velocity": (
            "velo", "exit velo", "exit velocity", "ev", "ev mph",
            "exitvelo", "ball speed", "exit speed",
        ),
        "launch_angle": ("la", "launch angle", "vert angle", "vertical angle", "vla"),
        "distance": ("dist", "distance", "carry", "total distance", "proj dist"),
        "result": ("res", "result", "outcome", "play result"),
        "hit_type": ("type", "hit type", "batted ball type", "bb type"),
    }

    UNIT_SUFFIXES = frozenset({"deg", "degrees", "mph", "kph", "ft", "feet", "m"})

    MISS_RESULTS = frozenset({
        "miss", "swing and miss", "swinging strike", "whiff", "strike", "k",
    })

    # Long-form vendor hit types, keyed with separators removed
    HIT_TYPE_WORDS = {
        "groundball": HitType.GROUND_BALL,
        "grounder": HitType.GROUND_BALL,
        "linedrive": HitType.LINE_DRIVE,
        "liner": HitType.LINE_DRIVE,
        "flyball": HitType.FLY_BALL,
        "popup": HitType.POP_UP,
        "popfly": HitType.POP_UP,
    }

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize the parser.

        Args:
            max_workers: Thread count for multi-file imports; None lets the
                executor choose, 1 parses files sequentially.
        """
        self.max_workers = max_workers
        self._alias_lookup: Dict[str, str] = {
            alias: canonical
            for canonical, aliases in self.COLUMN_ALIASES.items()
            for alias in aliases
        }

    # ==================== Header mapping ====================

    def _match_header(self, header: str) -> Optional[str]:
        normalized = normalize_header(header)
        if normalized in self._alias_lookup:
            return self._alias_lookup[normalized]

        # "exit velo mph" style headers carrying a unit suffix; two-letter
        # aliases such as "la" only match when the suffix is a known unit
        for alias, canonical in self._alias_lookup.items():
            if not normalized.startswith(alias + " "):
                continue
            suffix = normalized[len(alias) + 1:]
            if len(alias) > 2 or suffix in self.UNIT_SUFFIXES:
                return canonical
        return None

    def map_columns(self, headers: Iterable[str]) -> Dict[str, str]:
        """
        Map raw headers onto canonical field names.

        Exact alias matches take precedence over unit-suffixed ones; when two
        headers map to the same field the leftmost wins.

        Args:
            headers: Raw header row.

        Returns:
            Dictionary of raw header -> canonical field.
        """
        headers = list(headers)
        mapping: Dict[str, str] = {}
        claimed = set()

        for exact_pass in (True, False):
            for header in headers:
                if header in mapping:
                    continue
                normalized = normalize_header(header)
                if exact_pass:
                    canonical = self._alias_lookup.get(normalized)
                else:
                    canonical = self._match_header(header)
                if canonical and canonical not in claimed:
                    mapping[header] = canonical
                    claimed.add(canonical)

        ignored = [h for h in headers if h not in mapping]
        if ignored:
            logger.debug(f"Ignoring unrecognized columns: {ignored}")
        return mapping

    # ==================== Row classification ====================

    def _classify_outcome(self, result: str, exit_velocity: Optional[float]) -> SwingOutcome:
        lowered = result.lower()
        if "foul" in lowered:
            return SwingOutcome.FOUL
        if lowered in self.MISS_RESULTS or (not lowered and exit_velocity is None):
            return SwingOutcome.MISS
        return SwingOutcome.IN_PLAY

    def _classify_hit_type(self, vendor_type: str, launch_angle: Optional[float]) -> HitType:
        subcode = HitType.parse(vendor_type)
        if subcode is not None and subcode is not HitType.UNKNOWN:
            return subcode

        word = re.sub(r"[\s_\-]", "", vendor_type.lower())
        if word in self.HIT_TYPE_WORDS:
            return self.HIT_TYPE_WORDS[word]

        return hit_type_from_angle(launch_angle)

    # ==================== Parsing ====================

    def _read_frame(self, text: str, source: str) -> Tuple[pd.DataFrame, int]:
        bad_lines: List[List[str]] = []

        def _count_bad_line(line: List[str]) -> None:
            bad_lines.append(line)
            return None

        text, unterminated = drop_unterminated_quotes(text)

        try:
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                engine="python",
                skipinitialspace=True,
                on_bad_lines=_count_bad_line,
            )
        except pd.errors.EmptyDataError:
            raise EmptyInputError(
                f"no valid swing data in {source}: check column headers (found: none)",
                source=source,
            )

        if bad_lines:
            logger.warning(f"{source}: {len(bad_lines)} line(s) with the wrong field count")
        if unterminated:
            logger.warning(f"{source}: {unterminated} line(s) with an unterminated quote")
        return df, len(bad_lines) + unterminated

    def _numeric_column(self, df: pd.DataFrame, header: Optional[str]) -> pd.Series:
        if header is None:
            return pd.Series(np.nan, index=df.index, dtype=float)
        values = pd.to_numeric(df[header].str.strip(), errors="coerce")
        return values.replace([np.inf, -np.inf], np.nan).astype(float)

    def _text_column(self, df: pd.DataFrame, header: Optional[str]) -> pd.Series:
        if header is None:
            return pd.Series("", index=df.index, dtype=object)
        return df[header].fillna("").astype(str).str.strip()

    def parse_text(self, text: str, source: str = "<input>") -> ParseResult:
        """
        Parse one vendor export.

        Args:
            text: Raw CSV content including the header row.
            source: Name used in warnings and error messages.

        Returns:
            ParseResult with the valid swings in file order.

        Raises:
            EmptyInputError: If the file yields no valid swings.
        """
        df, bad_line_count = self._read_frame(text, source)

        mapping = self.map_columns(df.columns)
        by_field = {canonical: header for header, canonical in mapping.items()}

        numeric = {
            name: self._numeric_column(df, by_field.get(name))
            for name in NUMERIC_COLUMNS
        }
        # Zero or negative exit velocity means the vendor saw no contact
        numeric["exit_velocity"] = numeric["exit_velocity"].where(numeric["exit_velocity"] > 0)
        numeric["swing_number"] = numeric["swing_number"].where(numeric["swing_number"] >= 1)

        results = self._text_column(df, by_field.get("result"))
        vendor_types = self._text_column(df, by_field.get("hit_type"))

        usable = results.ne("")
        for name in NUMERIC_COLUMNS:
            usable |= numeric[name].notna()

        records: List[SwingRecord] = []
        for position, index in enumerate(df.index, start=1):
            if not usable[index]:
                logger.debug(f"{source}: row {position} has no usable values, skipping")
                continue

            number = numeric["swing_number"][index]
            ev = _optional(numeric["exit_velocity"][index])
            la = _optional(numeric["launch_angle"][index])
            dist = _optional(numeric["distance"][index])
            result = results[index]

            outcome = self._classify_outcome(result, ev)
            if outcome is SwingOutcome.MISS:
                ev = la = dist = None
                hit_type = HitType.UNKNOWN
            else:
                hit_type = self._classify_hit_type(vendor_types[index], la)

            records.append(SwingRecord(
                swing_number=position if pd.isna(number) else int(number),
                outcome=outcome,
                result=result,
                hit_type=hit_type,
                exit_velocity=ev,
                launch_angle=la,
                distance=dist,
                source=source,
            ))

        skipped = bad_line_count + int((~usable).sum())

        if not records:
            found = ", ".join(str(c) for c in df.columns) or "none"
            raise EmptyInputError(
                f"no valid swing data in {source}: check column headers (found: {found})",
                source=source,
            )

        warning = None
        if skipped:
            warning = PartialParseWarning(source, skipped, len(records))
            logger.warning(str(warning))

        logger.info(f"Parsed {len(records)} swings from {source}")
        return ParseResult(
            source=source,
            records=tuple(records),
            skipped_rows=skipped,
            columns=mapping,
            warning=warning,
        )

    def parse_file(self, path: Union[str, Path]) -> ParseResult:
        """
        Parse a vendor export from disk.

        Args:
            path: Path to the CSV file.

        Returns:
            ParseResult for the file.
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8-sig", errors="replace")
        return self.parse_text(text, source=path.name)

    def _parse_source(self, source: Source) -> Union[ParseResult, Tuple[str, str]]:
        name = source[0] if isinstance(source, tuple) else Path(source).name
        try:
            if isinstance(source, tuple):
                return self.parse_text(source[1], source=name)
            return self.parse_file(source)
        except EmptyInputError as e:
            logger.error(f"Import failed for {name}: {e}")
            return (name, str(e))
        except OSError as e:
            logger.error(f"Could not read {name}: {e}")
            return (name, f"could not read {name}: {e}")

    def parse_files(self, sources: Iterable[Source]) -> ImportResult:
        """
        Parse several exports and merge them into one swing sequence.

        Files are parsed independently (in a thread pool unless max_workers
        is 1). The merged records are sorted by swing number; the sort is
        stable so swings sharing a number keep file order.

        Args:
            sources: File paths or (name, csv_text) pairs.

        Returns:
            ImportResult with the merged records and per-file outcomes.

        Raises:
            EmptyInputError: If no file produced a valid swing.
        """
        sources = list(sources)
        if not sources:
            raise EmptyInputError("no valid swing data: no files given")

        if self.max_workers == 1 or len(sources) == 1:
            outcomes = [self._parse_source(s) for s in sources]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(self._parse_source, sources))

        files: List[ParseResult] = []
        failed: Dict[str, str] = {}
        for outcome in outcomes:
            if isinstance(outcome, ParseResult):
                files.append(outcome)
            else:
                name, message = outcome
                failed[name] = message

        if not files:
            details = "; ".join(failed.values())
            raise EmptyInputError(f"no valid swing data in any file ({details})")

        merged = [record for result in files for record in result.records]
        merged.sort(key=lambda r: r.swing_number)

        logger.info(
            f"Imported {len(merged)} swings from {len(files)} file(s), "
            f"{len(failed)} failed"
        )
        return ImportResult(records=tuple(merged), files=tuple(files), failed_files=failed)


def hit_type_from_angle(launch_angle: Optional[float]) -> HitType:
    """Derive the batted-ball type from launch angle alone."""
    if launch_angle is None:
        return HitType.UNKNOWN
    for upper, hit_type in HIT_TYPE_BANDS:
        if launch_angle < upper:
            return hit_type
    return HitType.POP_UP


def _optional(value: float) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def parse_csv(text: str, source: str = "<input>") -> ParseResult:
    """Parse a single export with a default parser."""
    return SwingCSVParser().parse_text(text, source=source)


def parse_files(sources: Iterable[Source], max_workers: Optional[int] = None) -> ImportResult:
    """Parse and merge several exports with a default parser."""
    return SwingCSVParser(max_workers=max_workers).parse_files(sources)
