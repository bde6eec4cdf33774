import io

import pytest

from cleaning import clean_injuries

SAMPLE_CSV = """Date,Team,Acquired,Relinquished,Notes,Source
2010-10-03,Bulls,,Carlos Boozer,fractured bone in right pinky finger (out indefinitely),a
2010-10-06,Pistons,,Jonas Jerebko,torn right Achilles tendon (out indefinitely),b
2011-01-12,Bulls,Carlos Boozer,,returned to lineup,c
2012-03-10,Spurs,,Tim Duncan,rest (DNP),d
2012-03-10,Spurs,,Manu Ginobili,hamstring strain (out for season),e
2013-04-02,,,Derrick Rose,left knee surgery,f
2014-11-19,Lakers,,Kobe Bryant,sore right knee (DTD),g
2015-12-01,Spurs,,Tim Duncan,rest (DNP),h
2016-02-10,Celtics,,Marcus Smart,strained left hamstring (DTD),i
2017-05-05,Warriors,,Kevin Durant,bruised left shin (knee contusion),j
"""


@pytest.fixture
def sample_csv():
    return io.StringIO(SAMPLE_CSV)


@pytest.fixture
def sample_path(tmp_path):
    path = tmp_path / "injuries.csv"
    path.write_text(SAMPLE_CSV)
    return path


@pytest.fixture
def records(sample_csv):
    return clean_injuries(sample_csv)
