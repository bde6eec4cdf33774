import io

from aggregation import summarize
from report import build_report, main, print_report, write_report


def test_build_report_tables(records):
    tables = build_report(records, top=3)

    assert list(tables)[:4] == [
        "events_by_year",
        "events_by_year_month",
        "events_by_month",
        "events_by_weekday",
    ]
    assert len(tables["top_players"]) == 3
    assert tables["rest_by_team"]["team"].tolist() == ["Spurs"]
    assert "hamstring" not in tables["hamstring_cause_words"]["cause_token"].tolist()
    assert "knee" not in tables["knee_cause_words"]["cause_token"].tolist()
    assert tables["knee_by_year"]["count"].sum() == 2


def test_print_report(records):
    out = io.StringIO()
    print_report(summarize(records), build_report(records), out=out)

    text = out.getvalue()
    assert "Injury events: 9" in text
    assert "Top players:" in text
    assert "Tim Duncan" in text


def test_write_report(records, tmp_path):
    tables = build_report(records)
    write_report(tables, tmp_path / "tables")

    written = sorted(p.stem for p in (tmp_path / "tables").glob("*.csv"))
    assert written == sorted(tables)
    assert (tmp_path / "tables" / "events_by_team.csv").read_text().startswith("team,count")


def test_main_runs_end_to_end(sample_path, tmp_path, capsys):
    assert main([str(sample_path), "--out", str(tmp_path / "out"), "--top", "5"]) == 0
    assert "Unique players: 8" in capsys.readouterr().out
    assert (tmp_path / "out" / "top_cause_words.csv").exists()


def test_main_reports_malformed_input(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("Date,Team,Acquired,Relinquished,Notes\nsomeday,Spurs,,Tim Duncan,rest (DNP)\n")
    assert main([str(bad)]) == 1
