from enum import Enum


class Sport(str, Enum):
    NBA = "nba"
    NCAAMBB = "ncaambb"
    MLB = "mlb"
    NHL = "nhl"
    NFL = "nfl"
    NCAAF = "ncaaf"


class SeasonPhase(str, Enum):
    PRE_SEASON = "pre-season"
    REGULAR_SEASON = "regular-season"
    POST_SEASON = "post-season"


class MetricKind(str, Enum):
    TEAM = "team"  # Season-long, fetched once per run
    GAME = "game"  # Fetched per date


class KeyType(str, Enum):
    ID = "id"
    ABBREVIATION = "abbreviation"


class PayloadFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


class ComponentName(str, Enum):
    MATCHUP_QUALITY = "matchupQuality"
    WIN_PROBABILITY = "winProbability"
    RECORD = "record"
    POWER_INDEX = "powerIndex"
    SPREAD = "spread"
    POPULARITY = "popularity"
    CONFERENCE = "conference"
    RANK = "rank"
