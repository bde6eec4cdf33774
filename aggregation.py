from operator import attrgetter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from cleaning import InjuryRecord, to_frame

GROUP_KEYS = [
    "team",
    "player",
    "year",
    "month",
    "month_label",
    "year_month",
    "weekday",
    "is_rest",
    "is_hamstring",
    "is_knee",
    "status",
    "cause",
    "cause_token",
]
# Optional on the record; absent values form their own group with a None key
OPTIONAL_KEYS = {"team", "player", "status"}

is_rest = attrgetter("is_rest")
is_hamstring = attrgetter("is_hamstring")
is_knee = attrgetter("is_knee")


def cause_tokens(cause: str, stop_tokens: Iterable[str] = ()) -> List[str]:
    stop = set(stop_tokens)
    return [t for t in cause.lower().split() if t not in stop]


def count_by(
    records: Sequence[InjuryRecord],
    by: Union[str, Sequence[str]],
    where: Optional[Callable[[InjuryRecord], bool]] = None,
    top: Optional[int] = None,
    stop_tokens: Iterable[str] = (),
) -> pd.DataFrame:
    """Count events per group.

    Returns the key column(s) plus "count", sorted by count descending and then
    by key ascending. Groups with no events are not listed. `where` filters the
    records first; `top` keeps the first N rows. Absent team, player or status
    values count under a None key, after present keys with the same count.
    Grouping on "cause_token" splits each lower-cased cause into words,
    leaving out `stop_tokens`.
    """
    keys = [by] if isinstance(by, str) else list(by)
    bad = [k for k in keys if k not in GROUP_KEYS]
    if bad or not keys:
        raise ValueError(f"Cannot group by {bad or keys}; expected some of {GROUP_KEYS}")

    if where is not None:
        records = [r for r in records if where(r)]
    frame = to_frame(records)

    if "cause_token" in keys:
        frame["cause_token"] = [cause_tokens(c, stop_tokens) for c in frame["cause"]]
        frame = frame.explode("cause_token").dropna(subset=["cause_token"])

    if frame.empty:
        return pd.DataFrame(columns=keys + ["count"])

    counts = frame.groupby(keys, sort=False, dropna=False).size().reset_index(name="count")
    counts = counts.sort_values(
        ["count"] + keys,
        ascending=[False] + [True] * len(keys),
        kind="mergesort",
        na_position="last",
    ).reset_index(drop=True)
    for k in keys:
        if k in OPTIONAL_KEYS:
            counts[k] = counts[k].astype(object).where(counts[k].notna(), None)
    if top is not None:
        counts = counts.head(top)
    return counts


def count_cause_tokens(records, where=None, top=None, stop_tokens=()):
    return count_by(records, "cause_token", where=where, top=top, stop_tokens=stop_tokens)


def summarize(records: Sequence[InjuryRecord]) -> Dict:
    frame = to_frame(records)
    has_rows = not frame.empty
    return {
        "events": len(frame),
        "players": int(frame["player"].nunique()),
        "teams": int(frame["team"].nunique()),
        "first_date": frame["date"].min() if has_rows else None,
        "last_date": frame["date"].max() if has_rows else None,
        "years": sorted(int(y) for y in frame["year"].unique()),
        "rest_events": int(frame["is_rest"].sum()),
        "hamstring_events": int(frame["is_hamstring"].sum()),
        "knee_events": int(frame["is_knee"].sum()),
    }
