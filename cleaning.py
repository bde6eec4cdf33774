import logging
from dataclasses import dataclass, fields
from datetime import date
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from config import (
    HAMSTRING_KEYWORD,
    KNEE_KEYWORD,
    MONTH_LABELS,
    REST_KEYWORD,
    WEEKDAY_LABELS,
)
from loading import RawRecord, load_records

logger = logging.getLogger(__name__)

STATUS_OPEN = " ("
STATUS_CLOSE = ")"


@dataclass(frozen=True)
class InjuryRecord:
    """One injury or rest event, after the Acquired filter, with derived fields."""

    date: date
    team: Optional[str]
    player: Optional[str]
    notes: str
    acquired: Optional[str]
    year: int
    month: int
    year_month: str
    month_label: str
    weekday: str
    is_rest: bool
    cause: str
    status: Optional[str]
    is_hamstring: bool
    is_knee: bool


COLUMNS = [f.name for f in fields(InjuryRecord)]


def split_notes(notes: str) -> Tuple[str, Optional[str]]:
    """Split "<cause> (<status>)" on the first " (".

    Without a " (" the whole note is the cause and there is no status. A single
    trailing ")" is dropped from the status, and only if it is there.
    """
    cause, sep, rest = notes.partition(STATUS_OPEN)
    if not sep:
        return notes, None
    if rest.endswith(STATUS_CLOSE):
        rest = rest[: -len(STATUS_CLOSE)]
    return cause, rest


def recombine_notes(record: InjuryRecord) -> str:
    if record.status is None:
        return record.cause
    return f"{record.cause}{STATUS_OPEN}{record.status}{STATUS_CLOSE}"


def normalize_record(raw: RawRecord) -> Optional[InjuryRecord]:
    # "Acquired" rows are returns from injury, not injury events
    if raw.acquired is not None:
        return None

    notes = raw.notes if raw.notes is not None else ""
    cause, status = split_notes(notes)
    d = raw.date
    # Keyword matches are verbatim: no case folding. is_knee looks at the cause only.
    return InjuryRecord(
        date=d,
        team=raw.team,
        player=raw.player,
        notes=notes,
        acquired=None,
        year=d.year,
        month=d.month,
        year_month=f"{d.year:04d}-{d.month:02d}",
        month_label=MONTH_LABELS[d.month - 1],
        weekday=WEEKDAY_LABELS[d.weekday()],
        is_rest=REST_KEYWORD in notes,
        cause=cause,
        status=status,
        is_hamstring=HAMSTRING_KEYWORD in notes,
        is_knee=KNEE_KEYWORD in cause,
    )


def normalize_records(raws: Iterable[RawRecord]) -> List[InjuryRecord]:
    records = []
    dropped = 0
    for raw in raws:
        rec = normalize_record(raw)
        if rec is None:
            dropped += 1
        else:
            records.append(rec)
    logger.info("Kept %d injury events, dropped %d acquired rows", len(records), dropped)
    return records


def to_frame(records: Iterable[InjuryRecord]) -> pd.DataFrame:
    """Lay records out one per row, in order, with one column per field."""
    rows = [[getattr(r, c) for c in COLUMNS] for r in records]
    return pd.DataFrame(rows, columns=COLUMNS)


def from_frame(frame: pd.DataFrame) -> List[InjuryRecord]:
    """Inverse of to_frame, for frames that kept their object columns (e.g. pickled)."""
    return [InjuryRecord(**row) for row in frame[COLUMNS].astype(object).to_dict("records")]


def clean_injuries(source) -> List[InjuryRecord]:
    """Load the raw CSV and return the enriched injury events."""
    return normalize_records(load_records(source))
