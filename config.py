import os

INJURIES_CSV = os.environ.get("NBA_INJURIES_CSV", "data/injuries_2010-2018.csv")
OUTPUT_DIR = os.environ.get("NBA_INJURIES_OUT", "output")
LOG_LEVEL = os.environ.get("NBA_INJURIES_LOG_LEVEL", "INFO")

# Canonical column names used everywhere after loading
DATE, TEAM, PLAYER, NOTES, ACQUIRED = "Date", "Team", "Player", "Notes", "Acquired"
REQUIRED_COLUMNS = [DATE, NOTES]
OPTIONAL_COLUMNS = [TEAM, PLAYER, ACQUIRED]

# Source column variants seen in the Kaggle injury CSVs (matched case-insensitively)
COLUMN_ALIASES = {
    "date": DATE,
    "team": TEAM,
    "team_abbrev": TEAM,
    "team_code": TEAM,
    "relinquished": PLAYER,
    "player": PLAYER,
    "player_name": PLAYER,
    "notes": NOTES,
    "acquired": ACQUIRED,
}

# Tried in order, first match wins
DATE_FORMATS = ["%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y"]

REST_KEYWORD = "rest"
HAMSTRING_KEYWORD = "hamstring"
KNEE_KEYWORD = "knee"

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

TOP_N = 10
