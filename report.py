import argparse
import logging
import os
import sys

from aggregation import count_by, count_cause_tokens, is_hamstring, is_knee, is_rest, summarize
from cleaning import clean_injuries
from config import INJURIES_CSV, LOG_LEVEL, OUTPUT_DIR, TOP_N
from errors import InjuryDataError

logger = logging.getLogger(__name__)


def build_report(records, top=TOP_N):
    """The EDA tables, in presentation order, keyed by table name."""
    return {
        "events_by_year": count_by(records, "year"),
        "events_by_year_month": count_by(records, "year_month"),
        "events_by_month": count_by(records, "month_label"),
        "events_by_weekday": count_by(records, "weekday"),
        "events_by_team": count_by(records, "team"),
        "top_players": count_by(records, "player", top=top),
        "rest_vs_injury": count_by(records, "is_rest"),
        "rest_by_year": count_by(records, "year", where=is_rest),
        "rest_by_team": count_by(records, "team", where=is_rest),
        "rest_top_players": count_by(records, "player", where=is_rest, top=top),
        "top_statuses": count_by(records, "status", top=top),
        "top_cause_words": count_cause_tokens(records, top=top * 2),
        "hamstring_by_year": count_by(records, "year", where=is_hamstring),
        "hamstring_by_team": count_by(records, "team", where=is_hamstring, top=top),
        # the filter word itself would top its own subset
        "hamstring_cause_words": count_cause_tokens(
            records, where=is_hamstring, top=top * 2, stop_tokens=["hamstring"]
        ),
        "knee_by_year": count_by(records, "year", where=is_knee),
        "knee_cause_words": count_cause_tokens(
            records, where=is_knee, top=top * 2, stop_tokens=["knee"]
        ),
    }


def print_report(summary, tables, out=None):
    out = out or sys.stdout
    print("Injury events:", summary["events"], file=out)
    print("Unique players:", summary["players"], file=out)
    print("Unique teams:", summary["teams"], file=out)
    print("Date range:", summary["first_date"], "to", summary["last_date"], file=out)
    print("Injury years:", summary["years"], file=out)
    print(
        "Rest / hamstring / knee events:",
        summary["rest_events"],
        summary["hamstring_events"],
        summary["knee_events"],
        file=out,
    )
    for name, table in tables.items():
        print(f"\n{name.replace('_', ' ').capitalize()}:", file=out)
        print(table.to_string(index=False), file=out)


def write_report(tables, out_dir):
    os.makedirs(out_dir, exist_ok=True)
    for name, table in tables.items():
        table.to_csv(os.path.join(out_dir, f"{name}.csv"), index=False)
    logger.info("Wrote %d tables to %s", len(tables), out_dir)


def main(argv=None):
    p = argparse.ArgumentParser(description="Descriptive report over NBA injury events")
    p.add_argument("csv", nargs="?", default=INJURIES_CSV, help="path to the injuries CSV")
    p.add_argument("--out", default=None, help=f"write each table as CSV here (e.g. {OUTPUT_DIR})")
    p.add_argument("--top", type=int, default=TOP_N)
    p.add_argument("--log-level", default=LOG_LEVEL)
    args = p.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s"
    )

    try:
        records = clean_injuries(args.csv)
    except InjuryDataError as e:
        logger.error("%s: %s", args.csv, e)
        return 1

    tables = build_report(records, top=args.top)
    print_report(summarize(records), tables)
    if args.out:
        write_report(tables, args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
