import asyncio
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger
from pydantic import BaseModel, ValidationError

from slatescore.adapters.base import ParsedRecord, ParseError
from slatescore.adapters.espn_power_index import POWER_INDEXES
from slatescore.adapters.registry import AdapterRegistry, SourceSpec, default_registry
from slatescore.calculation.slate_scores import SlateScorer
from slatescore.config.sports import SportScoringConfig, default_sport_configs
from slatescore.models.enums import KeyType, MetricKind, PayloadFormat, Sport
from slatescore.models.game import Game
from slatescore.models.team import Team
from slatescore.normalization.merger import merge_records
from slatescore.normalization.team_resolver import TeamIdentityResolver
from slatescore.reference.tables import ReferenceTables, load_reference_tables
from slatescore.scrapers.fetcher import Fetcher, ScraperError

SportLike = Union[Sport, str]
# game id -> scored game, for one (date, sport)
SportSlate = Dict[str, Game]


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """Like asyncio.gather, but cancels the still-running siblings once one fails."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class IngestionError(Exception):
    """A feed failed as a whole, failing its sport for the date(s) involved."""

    def __init__(
        self,
        sport: Sport,
        kind: Optional[MetricKind],
        source: str,
        message: str,
        date: Optional[str] = None,
    ):
        super().__init__(f"{sport.value} {source} ({kind.value if kind else 'unknown'}): {message}")
        self.sport = sport
        self.kind = kind
        self.source = source
        self.message = message
        self.date = date


class IngestionFailure(BaseModel):
    """Which sport, date and feed failed, for collaborators reporting partial results."""

    sport: Sport
    date: Optional[str] = None
    kind: Optional[MetricKind] = None
    source: str
    message: str


class SportTeams(BaseModel):
    """A sport's merged team records for one pipeline run."""

    sport: Sport
    teams: Dict[str, Team] = {}
    has_power_indexes: bool = False


class SlateResult(BaseModel):
    """Aggregate output of a run."""

    # date -> sport -> game id -> game
    games: Dict[str, Dict[Sport, SportSlate]] = {}
    # date -> game id -> game, across sports
    all_games: Dict[str, Dict[str, Game]] = {}
    teams: Dict[Sport, Dict[str, Team]] = {}
    failures: List[IngestionFailure] = []

    def merge(self, other: "SlateResult") -> "SlateResult":
        return SlateResult(
            games={**self.games, **other.games},
            all_games={**self.all_games, **other.all_games},
            teams={**self.teams, **other.teams},
            failures=self.failures + other.failures,
        )


class SlatePipeline:
    """Fetch -> parse -> resolve -> merge -> score, per sport and date.

    One instance is one ingestion cycle: team-scoped feeds are fetched at
    most once per sport and shared by every date in the run.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        registry: Optional[AdapterRegistry] = None,
        sport_configs: Optional[Dict[Sport, SportScoringConfig]] = None,
        reference: Optional[ReferenceTables] = None,
    ):
        self.fetcher = fetcher
        self.registry = registry or default_registry()
        self.sport_configs = sport_configs or default_sport_configs()
        self.reference = reference if reference is not None else load_reference_tables()
        self._team_tasks: Dict[Sport, "asyncio.Future[SportTeams]"] = {}

    # --- Fetching ------------------------------------------------------

    async def _fetch_records(
        self, sport: Sport, spec: SourceSpec, date: Optional[str] = None
    ) -> List[ParsedRecord]:
        url = spec.url(date)
        as_json = spec.adapter.payload_format == PayloadFormat.JSON
        logger.debug(f"Fetching {sport.value} {spec.name} from {url}")
        try:
            payload = await self.fetcher.fetch(url, as_json=as_json)
            records = spec.adapter.parse(payload)
        except (ScraperError, ParseError) as e:
            logger.error(f"{sport.value} {spec.name} feed failed: {e}")
            raise IngestionError(sport, spec.kind, spec.name, str(e), date) from e
        logger.debug(f"{sport.value} {spec.name}: {len(records)} records")
        return records

    # --- Team-scoped ---------------------------------------------------

    async def get_team_data(self, sport: SportLike) -> SportTeams:
        """The sport's merged team records, fetched once per pipeline instance."""
        sport = Sport(sport)
        task = self._team_tasks.get(sport)
        if task is None:
            task = asyncio.ensure_future(self._load_team_data(sport))
            self._team_tasks[sport] = task
        return await task

    async def _load_team_data(self, sport: Sport) -> SportTeams:
        specs = self.registry.sources(sport, MetricKind.TEAM)
        logger.info(f"Fetching {len(specs)} team feeds for {sport.value}")
        results = await gather_or_cancel(*(self._fetch_records(sport, spec) for spec in specs))

        fragments = [record for records in results for record in records]
        merged = merge_records(r for r in fragments if r.key_type == KeyType.ID)

        abbreviated = [r for r in fragments if r.key_type == KeyType.ABBREVIATION]
        if abbreviated:
            roster = {team_id: data.get("abbreviation") for team_id, data in merged.items()}
            resolver = TeamIdentityResolver(sport, roster)
            merged = merge_records(resolver.resolve_records(abbreviated), into=merged)

        teams: Dict[str, Team] = {}
        for team_id, data in merged.items():
            try:
                teams[team_id] = Team.model_validate({**data, "id": team_id})
            except ValidationError as e:
                logger.warning(f"Skipping {sport.value} team {team_id}: {e}")

        has_power_indexes = any(team.metrics.get(POWER_INDEXES) for team in teams.values())
        logger.success(f"Loaded {len(teams)} {sport.value} teams")
        return SportTeams(sport=sport, teams=teams, has_power_indexes=has_power_indexes)

    # --- Game-scoped ---------------------------------------------------

    async def run_sport_date(self, date: str, sport: SportLike) -> SportSlate:
        """Scores every game of `sport` scheduled on `date` (YYYYMMDD)."""
        sport = Sport(sport)
        specs = self.registry.sources(sport, MetricKind.GAME)
        logger.info(f"Processing {sport.value} for {date}")

        team_data, *results = await asyncio.gather(
            self.get_team_data(sport),
            *(self._fetch_records(sport, spec, date) for spec in specs),
        )

        games_data = merge_records(
            record for spec, records in zip(specs, results) if spec.primary for record in records
        )
        enrichment = [
            record
            for spec, records in zip(specs, results)
            if not spec.primary
            for record in records
        ]

        if (games_data or enrichment) and not team_data.has_power_indexes:
            required = [
                spec.name
                for spec in self.registry.sources(sport, MetricKind.TEAM)
                if spec.required_for_scoring
            ]
            if required:
                raise IngestionError(
                    sport,
                    MetricKind.TEAM,
                    required[0],
                    "no power index data for the scheduled games",
                    date,
                )

        unknown = {record.key for record in enrichment if record.key not in games_data}
        if unknown:
            logger.debug(f"Ignoring metrics for {len(unknown)} games missing from the schedule")
        games_data = merge_records(
            (record for record in enrichment if record.key in games_data), into=games_data
        )

        games: Dict[str, Game] = {}
        for game_id, data in games_data.items():
            try:
                games[game_id] = Game.model_validate({**data, "id": game_id})
            except ValidationError as e:
                logger.warning(f"Skipping {sport.value} game {game_id}: {e}")

        scorer = SlateScorer(self.sport_configs[sport], self.reference)
        return scorer.score_games(games, team_data.teams)

    # --- Aggregation ---------------------------------------------------

    async def run(self, date: str, sports: Sequence[SportLike]) -> SlateResult:
        """Runs every sport for one date; a failing sport does not affect the others."""
        sports = [Sport(sport) for sport in sports]
        outcomes = await asyncio.gather(
            *(self.run_sport_date(date, sport) for sport in sports),
            return_exceptions=True,
        )

        result = SlateResult(games={date: {}}, all_games={date: {}})
        for sport, outcome in zip(sports, outcomes):
            if isinstance(outcome, IngestionError):
                result.failures.append(
                    IngestionFailure(
                        sport=sport,
                        date=date,
                        kind=outcome.kind,
                        source=outcome.source,
                        message=outcome.message,
                    )
                )
            elif isinstance(outcome, Exception):
                logger.opt(exception=outcome).error(
                    f"Unexpected error processing {sport.value} for {date}"
                )
                result.failures.append(
                    IngestionFailure(sport=sport, date=date, source="pipeline", message=repr(outcome))
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.games[date][sport] = outcome
                result.all_games[date].update(outcome)

        result.teams = self.loaded_teams(sports)
        logger.info(
            f"Finished {date}: {len(result.all_games[date])} games, "
            f"{len(result.failures)} failed sports"
        )
        return result

    async def run_dates(self, dates: Iterable[str], sports: Sequence[SportLike]) -> SlateResult:
        """Runs several dates concurrently, sharing team-scoped data between them."""
        results = await asyncio.gather(*(self.run(date, sports) for date in dates))
        combined = SlateResult()
        for result in results:
            combined = combined.merge(result)
        return combined

    def loaded_teams(self, sports: Iterable[Sport]) -> Dict[Sport, Dict[str, Team]]:
        """Team records of the sports whose team feeds loaded successfully."""
        teams: Dict[Sport, Dict[str, Team]] = {}
        for sport in sports:
            task = self._team_tasks.get(sport)
            if task is not None and task.done() and not task.cancelled() and task.exception() is None:
                teams[sport] = task.result().teams
        return teams
