"""Scene ingestion: annotated CSV -> Records, with the bundled table as fallback.

CSV columns, in order:

    SCENE, ANATOMY, EMOTION_CLUSTER, INTENSITY, SECONDARY_EMOTION, SCENE_CONTEXT, QUOTES

INTENSITY is written as "7/10" (or a bare number on the 1-10 scale) and is
normalized to 0-1 here; nothing downstream sees the 1-10 scale. QUOTES ends
with " - Speaker".
"""

import asyncio
import csv
import io
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from emospine.data import fallback_records
from emospine.models import UNKNOWN_SPEAKER, Record

logger = logging.getLogger(__name__)

MIN_COLUMNS = 7
DEFAULT_INTENSITY = 0.5
QUOTE_SEPARATOR = " - "

_SECONDARY_SPLIT = re.compile(r"[,;]")
_QUOTE_CHARS = "\"'“”‘’"


class ParseResult:
    """Records parsed from a CSV plus a count of the rows that were dropped."""

    def __init__(self) -> None:
        self.records: list[Record] = []
        self.rows_seen = 0
        self.rows_dropped = 0

    def __repr__(self) -> str:
        return (
            f"ParseResult({len(self.records)} records, "
            f"{self.rows_dropped}/{self.rows_seen} rows dropped)"
        )


def parse_intensity(raw: str | None) -> float:
    """'7/10' or '7' -> 0.7. Clamped to 1-10 first; unparseable -> 0.5."""
    if raw is None:
        return DEFAULT_INTENSITY
    head = raw.strip().split("/", 1)[0].strip()
    try:
        value = float(head)
    except ValueError:
        return DEFAULT_INTENSITY
    if value != value:  # NaN
        return DEFAULT_INTENSITY
    return max(1.0, min(10.0, value)) / 10.0


def parse_secondary(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in _SECONDARY_SPLIT.split(raw) if part.strip())


def split_quote(raw: str | None) -> tuple[str, str]:
    """Split 'quote text - Speaker' into (quote, speaker).

    The speaker follows the last separator, so dashes inside the quote are
    kept. Without a separator the speaker is Unknown.
    """
    text = (raw or "").strip()
    cut = text.rfind(QUOTE_SEPARATOR)
    if cut == -1:
        return text.strip(_QUOTE_CHARS).strip(), UNKNOWN_SPEAKER
    quote = text[:cut].strip().strip(_QUOTE_CHARS).strip()
    speaker = text[cut + len(QUOTE_SEPARATOR):].strip() or UNKNOWN_SPEAKER
    return quote, speaker


def _parse_row(row: list[str]) -> Record | None:
    if len(row) < MIN_COLUMNS:
        return None
    try:
        ordinal = int(row[0].strip())
    except ValueError:
        return None
    # Unquoted commas in the context spill into extra columns; the quote is always last
    context = ",".join(row[5:-1]).strip()
    quote, speaker = split_quote(row[-1])
    try:
        return Record(
            ordinal=ordinal,
            category=row[2],
            intensity=parse_intensity(row[3]),
            secondary=parse_secondary(row[4]),
            context=context,
            quote=quote,
            speaker=speaker,
        )
    except ValidationError:
        return None


def parse_csv_detailed(text: str) -> ParseResult:
    result = ParseResult()
    reader = csv.reader(io.StringIO(text))
    next(reader, None)  # header
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        result.rows_seen += 1
        record = _parse_row(row)
        if record is None:
            result.rows_dropped += 1
            logger.debug("Dropped malformed row: %r", row[:2])
            continue
        result.records.append(record)
    return result


def parse_csv(text: str) -> list[Record]:
    """Parse CSV text into Records, dropping rows that can't be read."""
    return parse_csv_detailed(text).records


async def load_records(path: Path | None) -> list[Record]:
    """Load scenes from a CSV file, falling back to the bundled table.

    The read happens off the event loop. A missing or unreadable file, or one
    that yields no usable rows, falls back with a warning rather than failing.
    """
    if path is None:
        logger.info("No scene CSV configured; using bundled scenes")
        return fallback_records()
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s (%s); using bundled scenes", path, e)
        return fallback_records()

    result = parse_csv_detailed(text)
    if not result.records:
        logger.warning("No usable rows in %s; using bundled scenes", path)
        return fallback_records()
    logger.info("Loaded %s from %s", result, path)
    return result.records
