"""CLI for the lifting progression engine.

Developer CLI to preview progression blocks, create the schema, and bring
active mesocycles up to date with the calendar.
"""

from datetime import date, datetime

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from lifting.config.settings import settings
from lifting.core.logger import setup_logger
from lifting.db.session import get_session, init_db
from lifting.training.errors import TrainingError
from lifting.training.modify import repository
from lifting.training.modify.service import sync_mesocycle_to_date
from lifting.training.progression import project_block
from lifting.training.types import ExerciseProgressionProfile, ProgressionPolicy

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="lifting-cli",
    help="Lifting CLI - progression previews and mesocycle maintenance",
    add_completion=False,
)

PREVIEW_EXERCISE_ID = "preview"


def _setup_logging(debug: bool = False) -> None:
    """Set up logging from settings, optionally forcing DEBUG."""
    setup_logger(
        level="DEBUG" if debug else settings.log_level,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


def _format_weight(weight: float) -> str:
    return f"{weight:g}"


@app.command()
def preview(
    weight: float = typer.Option(..., "--weight", "-w", help="Week 1 weight"),
    reps: int = typer.Option(8, "--reps", "-r", help="Week 1 reps"),
    sets: int = typer.Option(3, "--sets", "-s", help="Sets per training week"),
    increment: float = typer.Option(5.0, "--increment", help="Weight added after a successful week"),
    min_reps: int = typer.Option(8, "--min-reps", help="Bottom of the rep range"),
    max_reps: int = typer.Option(12, "--max-reps", help="Top of the rep range"),
    weeks: int = typer.Option(
        settings.default_training_weeks, "--weeks", help="Training weeks (a deload week is appended)"
    ),
    miss: bool = typer.Option(False, "--miss", help="Assume every week misses its target"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Print the projected targets of a whole block for one exercise."""
    _setup_logging(debug)

    try:
        profile = ExerciseProgressionProfile(
            exercise_id=PREVIEW_EXERCISE_ID,
            plan_exercise_id=PREVIEW_EXERCISE_ID,
            base_weight=weight,
            base_reps=reps,
            base_sets=sets,
            weight_increment=increment,
            min_reps=min_reps,
            max_reps=max_reps,
        )
        total_weeks = weeks + 1
        projection = project_block(
            profile,
            total_weeks,
            [not miss] * total_weeks,
            policy=ProgressionPolicy.from_settings(),
        )
    except TrainingError as e:
        console.print(f"[red]Error:[/red] {e.message}", style="bold red")
        raise typer.Exit(1) from e

    outcome = "miss" if miss else "hit"
    table = Table(title=f"Block preview (every week: {outcome})")
    table.add_column("Week", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Reason")

    for targets in projection:
        table.add_row(
            str(targets.week_number),
            _format_weight(targets.target_weight),
            str(targets.target_reps),
            str(targets.target_sets),
            targets.reason,
            style="cyan" if targets.is_deload else None,
        )

    console.print(table)


@app.command("init-db")
def init_db_command(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    """Create all tables on the configured database."""
    _setup_logging(debug)
    init_db()
    console.print(f"[green]Database schema ready:[/green] {settings.database_url}")


@app.command()
def sync(
    on_date: datetime | None = typer.Option(
        None, "--date", formats=["%Y-%m-%d"], help="Date to sync to (default: today)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Advance every active mesocycle to the week implied by the date."""
    _setup_logging(debug)
    target_date = on_date.date() if on_date is not None else date.today()

    try:
        with get_session() as session:
            mesocycles = repository.list_active_mesocycles(session)
            if not mesocycles:
                console.print("[yellow]No active mesocycles[/yellow]")
                return

            for mesocycle in mesocycles:
                started = sync_mesocycle_to_date(session, mesocycle.id, target_date)
                if started:
                    weeks = ", ".join(str(week) for week in started)
                    console.print(f"[green]{mesocycle.id}[/green]: started week(s) {weeks}")
                else:
                    console.print(f"{mesocycle.id}: up to date (week {mesocycle.current_week})")
    except TrainingError as e:
        logger.exception(f"Error syncing mesocycles: {e}")
        console.print(f"[red]Error:[/red] {e.message}", style="bold red")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
