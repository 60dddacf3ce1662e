from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from loguru import logger

from slatescore.adapters.espn_matchup_quality import MATCHUP_QUALITIES
from slatescore.adapters.espn_power_index import POWER_INDEXES
from slatescore.config.sports import SportScoringConfig
from slatescore.models.enums import ComponentName, SeasonPhase
from slatescore.models.game import Game
from slatescore.models.score import GameScore, ScoreComponent
from slatescore.models.team import Team
from slatescore.reference.tables import ReferenceTables
from slatescore.utils.calcs import (
    calculate_win_percentage,
    inverse_sigmoid,
    neg_exp,
    sigmoid,
    to_float,
)
from .calibration import calibrate, phase_bands

PowerIndexAccessor = Callable[[Mapping[str, Any]], Optional[float]]

# Unranked teams are reported with ranks above this (ESPN uses 99)
MAX_RANK = 25


def _lookup(metrics: Mapping[str, Any], *path: str) -> Optional[float]:
    value: Any = metrics
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return to_float(value)


# Where each provider puts its power index, by accessor name:
#   bpi  - ESPN basketball power index feed, category "bpi", stat "bpi" (nba, ncaambb)
#   fpi  - ESPN football power index feed, category "fpi", stat "fpi" (nfl, ncaaf)
#   RPI  - ESPN RPI HTML table, "RPI" column (mlb)
#   avg_overall_prediction - predictions CSV export column (nhl)
POWER_INDEX_ACCESSORS: Dict[str, PowerIndexAccessor] = {
    "bpi": lambda pi: _lookup(pi, "bpi", "bpi"),
    "fpi": lambda pi: _lookup(pi, "fpi", "fpi"),
    "RPI": lambda pi: _lookup(pi, "RPI"),
    "avg_overall_prediction": lambda pi: _lookup(pi, "avg_overall_prediction"),
}


def rank_adjustment(rank: Optional[int]) -> float:
    """1.0 for the top-ranked team down to 0.04 for #25; 0 when unranked."""
    if rank is None or rank < 1 or rank > MAX_RANK:
        return 0.0
    return (MAX_RANK + 1 - rank) / MAX_RANK


class SlateScorer:
    """Computes slate scores for one sport's games."""

    def __init__(
        self,
        config: SportScoringConfig,
        reference: Optional[ReferenceTables] = None,
    ):
        self.config = config
        self.reference = reference or ReferenceTables()
        self.accessors: List[Tuple[str, PowerIndexAccessor]] = [
            (name, POWER_INDEX_ACCESSORS[name]) for name in config.power_index_fields
        ]

    def score_games(
        self, games: Mapping[str, Game], teams: Mapping[str, Team]
    ) -> Dict[str, Game]:
        """Returns copies of `games` with `score` attached."""
        scored: Dict[str, Game] = {}
        for game_id, game in games.items():
            home_team = teams.get(game.home.id)
            away_team = teams.get(game.away.id)
            if home_team is None or away_team is None:
                logger.debug(f"Game {game_id}: no season record for one or both teams")
            scored[game_id] = game.model_copy(
                update={"score": self.score_game(game, home_team, away_team)}
            )

        with_score = sum(1 for g in scored.values() if g.score.has_score)
        logger.info(
            f"Scored {len(scored)} {self.config.sport.value} games "
            f"({len(scored) - with_score} without usable metrics)"
        )
        return scored

    def score_game(
        self,
        game: Game,
        home_team: Optional[Team] = None,
        away_team: Optional[Team] = None,
    ) -> GameScore:
        components = self.components(game, home_team, away_team)
        if not components:
            return GameScore.unavailable()

        bands = phase_bands(self.config.calibration, game.season_phase)
        raw_score = inverse_sigmoid(bands.baseline, 1, 0)
        raw_score += sum(component.contribution for component in components)

        unbaselined = sigmoid(raw_score, 1, 0)
        return GameScore(
            slate_score=calibrate(unbaselined, bands),
            components={component.name: component for component in components},
            unbaselined_slate_score=unbaselined,
        )

    def components(
        self,
        game: Game,
        home_team: Optional[Team] = None,
        away_team: Optional[Team] = None,
    ) -> List[ScoreComponent]:
        """Every component whose inputs are present on both sides."""
        weights = self.config.weights
        dampening = (
            self.config.preseason_dampening
            if game.season_phase == SeasonPhase.PRE_SEASON
            else 1.0
        )
        candidates = [
            (ComponentName.MATCHUP_QUALITY, weights.matchup_quality, self._matchup_quality(game)),
            (ComponentName.WIN_PROBABILITY, weights.win_probability, self._win_probability(game)),
            (ComponentName.RECORD, weights.record, self._record(game)),
            (
                ComponentName.POWER_INDEX,
                weights.power_index,
                self._power_index(game, home_team, away_team),
            ),
            (ComponentName.SPREAD, weights.spread, self._spread(game)),
            (ComponentName.POPULARITY, weights.popularity, self._popularity(game)),
        ]
        if self.config.ncaa:
            candidates += [
                (
                    ComponentName.CONFERENCE,
                    weights.conference,
                    self._conference(game, home_team, away_team),
                ),
                (ComponentName.RANK, weights.rank, self._rank(game)),
            ]

        return [
            ScoreComponent(name=name.value, value=value, weight=weight * dampening)
            for name, weight, value in candidates
            if value is not None
        ]

    # --- Components -----------------------------------------------------

    @staticmethod
    def _matchup_stats(team: Team) -> Mapping[str, Any]:
        return team.metrics.get(MATCHUP_QUALITIES) or {}

    def _matchup_quality(self, game: Game) -> Optional[float]:
        home = _lookup(self._matchup_stats(game.home), "matchupquality")
        away = _lookup(self._matchup_stats(game.away), "matchupquality")
        if home is None or away is None:
            return None
        # Symmetric per matchup; both sides report the same number
        return (home - 50) / 50

    def _win_probability(self, game: Game) -> Optional[float]:
        home = _lookup(self._matchup_stats(game.home), "teampredwinpct")
        away = _lookup(self._matchup_stats(game.away), "teampredwinpct")
        if home is None or away is None:
            return None
        return (1 - abs(home - away) / 50) / 2

    def _record(self, game: Game) -> Optional[float]:
        if not game.home.record or not game.away.record:
            return None
        pseudo = self.config.record_pseudo_count
        try:
            home = calculate_win_percentage(game.home.record, pseudo)
            away = calculate_win_percentage(game.away.record, pseudo)
        except ValueError as e:
            logger.warning(f"Game {game.id}: skipping record component ({e})")
            return None
        return home + away - 1

    def power_index_value(self, *teams: Optional[Team]) -> Optional[float]:
        """First non-null accessor result, checking each team record in turn."""
        for team in teams:
            if team is None:
                continue
            power_indexes = team.metrics.get(POWER_INDEXES) or {}
            for _name, accessor in self.accessors:
                value = accessor(power_indexes)
                if value is not None:
                    return value
        return None

    def _power_index(
        self, game: Game, home_team: Optional[Team], away_team: Optional[Team]
    ) -> Optional[float]:
        home = self.power_index_value(home_team, game.home)
        away = self.power_index_value(away_team, game.away)
        if home is None or away is None:
            return None
        scale, center = self.config.power_index.scale, self.config.power_index.center
        return sigmoid(home, scale, center) + sigmoid(away, scale, center) - 1

    def _spread(self, game: Game) -> Optional[float]:
        margin = _lookup(self._matchup_stats(game.home), "teampredmov")
        if margin is None:
            return None
        return 2 * neg_exp(margin, self.config.spread_scale) - 1

    def _popularity(self, game: Game) -> Optional[float]:
        table = self.reference.popularity.get(self.config.sport)
        if table is None:
            return None
        home = table.followers.get(game.home.id)
        away = table.followers.get(game.away.id)
        if home is None or away is None:
            return None
        return sigmoid(home, table.scale, table.center) + sigmoid(away, table.scale, table.center) - 1

    def _conference(
        self, game: Game, home_team: Optional[Team], away_team: Optional[Team]
    ) -> Optional[float]:
        table = self.reference.conferences.get(self.config.sport)
        if table is None:
            return None

        def strength(snapshot: Team, team: Optional[Team]) -> Optional[float]:
            conference = (team.conference_name if team else None) or snapshot.conference_name
            return table.strength_for(snapshot.id, conference)

        home = strength(game.home, home_team)
        away = strength(game.away, away_team)
        if home is None or away is None:
            return None
        return home + away - 1

    def _rank(self, game: Game) -> Optional[float]:
        if game.home.rank is None or game.away.rank is None:
            return None
        return rank_adjustment(game.home.rank) + rank_adjustment(game.away.rank) - 1
