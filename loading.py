import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

import pandas as pd

from config import (
    ACQUIRED,
    COLUMN_ALIASES,
    DATE,
    DATE_FORMATS,
    NOTES,
    OPTIONAL_COLUMNS,
    PLAYER,
    REQUIRED_COLUMNS,
    TEAM,
)
from errors import MalformedRowError, MissingColumnError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawRecord:
    row: int
    date: date
    team: Optional[str]
    player: Optional[str]
    notes: Optional[str]
    acquired: Optional[str]


def _cell(value):
    if value is None or pd.isna(value):
        return None
    return value


def normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    """Rename known column variants to the canonical names and add missing optional ones."""
    rename_map = {}
    for c in frame.columns:
        dst = COLUMN_ALIASES.get(str(c).strip().lower())
        if dst and dst not in frame.columns and dst not in rename_map.values():
            rename_map[c] = dst
    frame = frame.rename(columns=rename_map)

    for req in REQUIRED_COLUMNS:
        if req not in frame.columns:
            raise MissingColumnError(req, list(frame.columns))
    for opt in OPTIONAL_COLUMNS:
        if opt not in frame.columns:
            frame[opt] = None

    # Blank cells are absent, not present-but-empty. Notes keep their exact text.
    for c in [DATE, TEAM, PLAYER, ACQUIRED]:
        s = frame[c].astype("string").str.strip()
        frame[c] = s.mask(s.fillna("") == "").astype(object)
    frame[NOTES] = frame[NOTES].mask(frame[NOTES].str.strip() == "")
    return frame


def read_raw(source) -> pd.DataFrame:
    """Read the injury CSV with every column as text. Extra columns pass through."""
    frame = pd.read_csv(source, dtype=str, keep_default_na=False)
    frame = normalize_columns(frame)
    logger.info("Read %d rows (%d columns)", len(frame), len(frame.columns))
    return frame


def parse_dates(frame: pd.DataFrame) -> pd.Series:
    """Parse the Date column, coalescing across DATE_FORMATS.

    Raises MalformedRowError for the first row no format accepts, blanks included.
    """
    raw = frame[DATE]
    first_fmt, *other_fmts = DATE_FORMATS
    parsed = pd.to_datetime(raw, format=first_fmt, errors="coerce")
    for fmt in other_fmts:
        parsed = parsed.fillna(pd.to_datetime(raw, format=fmt, errors="coerce"))

    bad = parsed.isna()
    if bad.any():
        first = int(bad.to_numpy().argmax())
        raise MalformedRowError(first, _cell(raw.iloc[first]), bad_rows=int(bad.sum()))
    return parsed.dt.date


def load_records(source) -> List[RawRecord]:
    frame = read_raw(source)
    dates = parse_dates(frame)
    return [
        RawRecord(
            row=i,
            date=d,
            team=_cell(t),
            player=_cell(p),
            notes=_cell(n),
            acquired=_cell(a),
        )
        for i, (d, t, p, n, a) in enumerate(
            zip(dates, frame[TEAM], frame[PLAYER], frame[NOTES], frame[ACQUIRED])
        )
    ]
