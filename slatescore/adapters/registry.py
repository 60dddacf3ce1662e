# slatescore/adapters/registry.py
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from slatescore.config.settings import settings
from slatescore.models.enums import MetricKind, Sport
from .base import SourceAdapter
from .delimited_text import DelimitedTextAdapter
from .espn_matchup_quality import EspnMatchupQualityAdapter
from .espn_power_index import POWER_INDEXES, EspnPowerIndexAdapter
from .espn_roster import EspnRosterAdapter
from .espn_schedule import EspnScheduleAdapter
from .html_table import HtmlTableAdapter

ESPN_SITE_API = "https://site.api.espn.com/apis/site/v2/sports"
ESPN_WEB_API = "https://site.web.api.espn.com/apis"
ESPN_WEB = "https://www.espn.com"

# ESPN path per sport; "groups=50" restricts college basketball to Division I
SPORT_PATHS: Dict[Sport, str] = {
    Sport.NBA: "basketball/nba",
    Sport.NCAAMBB: "basketball/mens-college-basketball",
    Sport.MLB: "baseball/mlb",
    Sport.NHL: "hockey/nhl",
    Sport.NFL: "football/nfl",
    Sport.NCAAF: "football/college-football",
}
SPORT_QUERY: Dict[Sport, str] = {
    Sport.NCAAMBB: "&groups=50",
    Sport.NCAAF: "&groups=80",
}

# Names of the metric sources, used to report which feed failed
ROSTER = "roster"
POWER_INDEX = "powerIndex"
SCHEDULE = "schedule"
MATCHUP_QUALITY = "matchupQuality"

UrlBuilder = Callable[[Optional[str]], str]


@dataclass(frozen=True)
class SourceSpec:
    """One upstream feed: where to fetch it and which adapter parses it."""

    name: str
    kind: MetricKind
    url: UrlBuilder  # date (YYYYMMDD) -> url; team-scoped feeds get None
    adapter: SourceAdapter
    # The feed must be non-empty whenever game-scoped metrics exist
    required_for_scoring: bool = False
    # Records from a primary feed define which entities exist; other feeds
    # only enrich them
    primary: bool = False


class AdapterRegistry:
    """Maps (sport, metric kind) to the ordered feeds that supply it."""

    def __init__(self):
        self._sources: Dict[Tuple[Sport, MetricKind], List[SourceSpec]] = {}

    def register(self, sport: Sport, spec: SourceSpec) -> None:
        self._sources.setdefault((sport, spec.kind), []).append(spec)

    def sources(self, sport: Sport, kind: MetricKind) -> List[SourceSpec]:
        return list(self._sources.get((sport, kind), []))


def _espn_sources(sport: Sport) -> List[SourceSpec]:
    path = SPORT_PATHS[sport]
    query = SPORT_QUERY.get(sport, "")
    return [
        SourceSpec(
            name=ROSTER,
            kind=MetricKind.TEAM,
            url=lambda _date: f"{ESPN_SITE_API}/{path}/teams?limit=1000",
            adapter=EspnRosterAdapter(),
        ),
        SourceSpec(
            name=SCHEDULE,
            kind=MetricKind.GAME,
            url=lambda date: f"{ESPN_SITE_API}/{path}/scoreboard?limit=1000{query}&dates={date}",
            adapter=EspnScheduleAdapter(sport),
            primary=True,
        ),
    ]


def _power_index_source(sport: Sport) -> SourceSpec:
    path = SPORT_PATHS[sport]
    return SourceSpec(
        name=POWER_INDEX,
        kind=MetricKind.TEAM,
        url=lambda _date: f"{ESPN_WEB_API}/fitt/v3/sports/{path}/powerindex?limit=1000",
        adapter=EspnPowerIndexAdapter(),
        required_for_scoring=True,
    )


def _matchup_quality_source(sport: Sport) -> SourceSpec:
    path = SPORT_PATHS[sport]
    query = SPORT_QUERY.get(sport, "")
    return SourceSpec(
        name=MATCHUP_QUALITY,
        kind=MetricKind.GAME,
        url=lambda date: f"{ESPN_WEB_API}/site/v2/sports/{path}/dailypowerindex?limit=1000{query}&dates={date}",
        adapter=EspnMatchupQualityAdapter(),
    )


def default_registry() -> AdapterRegistry:
    """Wires every supported sport to its providers."""
    registry = AdapterRegistry()
    for sport in Sport:
        for spec in _espn_sources(sport):
            registry.register(sport, spec)

    for sport in (Sport.NBA, Sport.NCAAMBB, Sport.NFL, Sport.NCAAF):
        registry.register(sport, _power_index_source(sport))

    for sport in (Sport.NBA, Sport.NCAAMBB):
        registry.register(sport, _matchup_quality_source(sport))

    registry.register(
        Sport.MLB,
        SourceSpec(
            name="rpi",
            kind=MetricKind.TEAM,
            url=lambda _date: f"{ESPN_WEB}/mlb/stats/rpi",
            adapter=HtmlTableAdapter(
                metric_name=POWER_INDEXES,
                table_attrs={"class": "tablehead"},
                skip_rows=1,
                header_row=0,
                link_marker="name",
            ),
            required_for_scoring=True,
        ),
    )
    registry.register(
        Sport.NHL,
        SourceSpec(
            name="predictions",
            kind=MetricKind.TEAM,
            url=lambda _date: settings.nhl_predictions_url,
            adapter=DelimitedTextAdapter(metric_name=POWER_INDEXES),
            required_for_scoring=True,
        ),
    )
    return registry
