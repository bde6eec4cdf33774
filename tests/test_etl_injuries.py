import shutil
from datetime import date

import pytest

pytest.importorskip("pyspark")
if shutil.which("java") is None:
    pytest.skip("Spark needs a Java runtime", allow_module_level=True)

from aggregation import count_by as count_records_by  # noqa: E402
from cleaning import clean_injuries  # noqa: E402
from errors import MalformedRowError  # noqa: E402
from etl_injuries import build_spark, count_by, load_injuries  # noqa: E402


@pytest.fixture(scope="module")
def spark():
    session = build_spark("nba-injuries-tests", master="local[1]")
    yield session
    session.stop()


@pytest.fixture
def injuries(spark, sample_path):
    return load_injuries(spark, str(sample_path))


def test_acquired_rows_dropped(injuries):
    assert injuries.count() == 9
    assert injuries.filter("row = 2").count() == 0


def test_derived_fields_match_the_pandas_records(injuries, records):
    rows = {r["row"]: r for r in injuries.collect()}
    boozer = rows[0]

    assert boozer["date"] == date(2010, 10, 3)
    assert boozer["year_month"] == "2010-10"
    assert boozer["month_label"] == "Oct"
    assert boozer["weekday"] == "Sun"

    spark_rows = [rows[i] for i in sorted(rows)]
    for row, rec in zip(spark_rows, records):
        assert row["cause"] == rec.cause
        assert row["status"] == rec.status
        assert row["team"] == rec.team
        assert (row["month_label"], row["weekday"]) == (rec.month_label, rec.weekday)
        assert (row["is_rest"], row["is_hamstring"], row["is_knee"]) == (
            rec.is_rest,
            rec.is_hamstring,
            rec.is_knee,
        )


def test_counts_match_the_pandas_aggregator(injuries, records):
    for key in ["team", "year", "status"]:
        got = [tuple(r) for r in count_by(injuries, key).collect()]
        expected = [tuple(r) for r in count_records_by(records, key).itertuples(index=False)]
        assert got == expected


def test_cause_tokens_with_stop_words(injuries):
    counts = count_by(injuries.filter("is_hamstring"), "cause_token", stop_tokens=["hamstring"])
    assert [tuple(r) for r in counts.collect()] == [("left", 1), ("strain", 1), ("strained", 1)]


def test_malformed_date(spark, tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text(
        "Date,Team,Acquired,Relinquished,Notes\n"
        "2012-03-10,Spurs,,Tim Duncan,rest (DNP)\n"
        "someday,Spurs,,Tim Duncan,rest (DNP)\n"
    )
    with pytest.raises(MalformedRowError) as exc:
        load_injuries(spark, str(bad))
    assert exc.value.row == 1
    assert exc.value.value == "someday"


def test_single_digit_dates_parse_like_pandas(spark, tmp_path):
    path = tmp_path / "short_dates.csv"
    path.write_text(
        "Date,Team,Acquired,Relinquished,Notes\n"
        "3/5/2012,Spurs,,Tim Duncan,rest (DNP)\n"
        "2012-03-07,Spurs,,Tim Duncan,rest (DNP)\n"
        "25/1/2013,,,Derrick Rose,left knee surgery\n"
    )

    rows = sorted(load_injuries(spark, str(path)).collect(), key=lambda r: r["row"])
    records = clean_injuries(str(path))

    assert [r["date"] for r in rows] == [date(2012, 3, 5), date(2012, 3, 7), date(2013, 1, 25)]
    assert [r["date"] for r in rows] == [rec.date for rec in records]
    assert [(r["month_label"], r["weekday"]) for r in rows] == [
        (rec.month_label, rec.weekday) for rec in records
    ]


def test_missing_team_counts_after_named_teams(injuries):
    got = [tuple(r) for r in count_by(injuries, "team").collect()]
    assert got[-1] == (None, 1)
