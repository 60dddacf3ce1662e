import sys
import asyncio
from datetime import datetime

# --- Settings/Logging ---
from slatescore.logging.setup import setup_logging
from slatescore.config.settings import settings

setup_logging()

from loguru import logger

# --- End Settings/Logging ---

from slatescore.models.enums import Sport
from slatescore.pipeline.orchestrator import SlatePipeline, SlateResult
from slatescore.reference.tables import load_reference_tables
from slatescore.scrapers.fetcher import Fetcher
from slatescore.utils.date_utils import dates_to_update

from rich import print
from rich.panel import Panel
from rich.table import Table


def render_result(result: SlateResult) -> None:
    """Prints each date's games, best slate score first, plus any failed feeds."""
    for date, games in sorted(result.all_games.items()):
        table = Table(title=f"Slate for {date}")
        table.add_column("Sport")
        table.add_column("Game")
        table.add_column("Start")
        table.add_column("Slate score", justify="right")
        table.add_column("Components")

        ranked = sorted(games.values(), key=lambda g: g.slate_score or -1, reverse=True)
        for game in ranked:
            home = game.home.abbreviation or game.home.id
            away = game.away.abbreviation or game.away.id
            start = game.date.strftime("%H:%M") if isinstance(game.date, datetime) else game.date
            score = game.score
            table.add_row(
                game.sport.value,
                f"{away} @ {home}",
                start,
                f"{score.slate_score:.3f}" if score and score.has_score else "-",
                ", ".join(score.components) if score else "",
            )
        print(table)

    if result.failures:
        lines = [
            f"{f.date} {f.sport.value} [{f.source}]: {f.message}" for f in result.failures
        ]
        print(Panel("\n".join(lines), title="Failed feeds", border_style="red"))


async def main() -> None:
    """Main entry point for the application."""
    logger.info("Starting slate scoring run")

    sports = [Sport(sport) for sport in settings.sports]
    dates = dates_to_update(settings.update_days)
    logger.info(f"Updating {[s.value for s in sports]} for dates {dates}")

    reference = load_reference_tables(settings.reference_data_dir)
    async with Fetcher() as fetcher:
        pipeline = SlatePipeline(fetcher, reference=reference)
        result = await pipeline.run_dates(dates, sports)

    total = sum(len(games) for games in result.all_games.values())
    if result.failures:
        logger.warning(
            f"Run finished with {len(result.failures)} failed sport/date pairs"
        )
    logger.success(f"Scored {total} games across {len(dates)} dates.")
    render_result(result)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
