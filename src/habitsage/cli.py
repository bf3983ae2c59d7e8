"""Command line interface for HabitSage."""

from __future__ import annotations

import functools

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.habit import FrequencyType
from .services.frequency import parse_frequency_days

pass_app = click.make_pass_decorator(AppContext)


def _user_errors(func):
    """Report validation and lookup failures as click errors (exit code 1)."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ValueError, LookupError) as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _describe_frequency(habit) -> str:
    if habit.frequency_days:
        days = ",".join(str(d) for d in habit.frequency_days)
        return f"{habit.frequency_type}:{days}"
    return habit.frequency_type


@click.group()
@click.option("--user-id", type=int, default=None, help="Act as this user (defaults to HABITSAGE_USER_ID).")
@click.pass_context
def cli(ctx: click.Context, user_id: int | None) -> None:
    """Track habits, streaks and completion heatmaps."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = create_app_context(config, user_id=user_id)


@cli.command("init-db")
@pass_app
def init_db(app: AppContext) -> None:
    """Create the database schema."""

    click.echo(f"Database ready at {app.config.DATABASE_URL}")


@cli.command("add")
@click.argument("title")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in FrequencyType]),
    default=FrequencyType.DAILY.value,
    show_default=True,
)
@click.option("--days", default=None, help="Comma separated days: 0-6 (Sunday first) or 1-31.")
@click.option("--interval", type=int, default=None, help="Custom frequency: every N days.")
@click.option("--target", type=int, default=None, help="Target completions per period.")
@click.option("--reminder-time", default=None, help="Reminder time as HH:MM (stored only).")
@click.option("--description", default=None)
@click.option("--icon", default="")
@click.option("--color", default="#a78bfa", show_default=True)
@click.option("--category", default=None)
@click.option("--sort-order", type=int, default=0, show_default=True)
@pass_app
@_user_errors
def add_habit(
    app: AppContext,
    title: str,
    frequency: str,
    days: str | None,
    interval: int | None,
    target: int | None,
    reminder_time: str | None,
    description: str | None,
    icon: str,
    color: str,
    category: str | None,
    sort_order: int,
) -> None:
    """Create a habit."""

    habit = app.habit_service.create_habit(
        {
            "title": title,
            "frequency_type": frequency,
            "frequency_days": parse_frequency_days(days, frequency),
            "frequency_interval": interval,
            "frequency_target": target,
            "reminder_time": reminder_time,
            "description": description,
            "icon": icon,
            "color": color,
            "category": category,
            "sort_order": sort_order,
        }
    )
    click.echo(f"Created habit {habit.id}: {habit.title}")


@cli.command("list")
@click.option("--all", "show_all", is_flag=True, default=False, help="Include archived habits.")
@pass_app
def list_habits(app: AppContext, show_all: bool) -> None:
    """List habits in sort order."""

    if show_all:
        habits = app.habit_repo.list_all(user_id=app.user_id, include_archived=True)
    else:
        habits = app.habit_service.active_habits()
    if not habits:
        click.echo("No habits yet.")
        return
    for habit in habits:
        suffix = " (archived)" if habit.is_archived else ""
        click.echo(f"{habit.id}\t{habit.icon} {habit.title} [{_describe_frequency(habit)}]{suffix}")


@cli.command("due")
@pass_app
def due_today(app: AppContext) -> None:
    """Show habits due today and whether they are done."""

    service = app.habit_service
    habits = service.habits_due_today()
    if not habits:
        click.echo("Nothing due today.")
        return
    for habit in habits:
        mark = "x" if service.is_habit_completed_today(habit.id) else " "
        click.echo(f"[{mark}] {habit.id}\t{habit.title}")


@cli.command("done")
@click.argument("habit_id", type=int)
@click.option("--notes", default=None)
@pass_app
@_user_errors
def complete(app: AppContext, habit_id: int, notes: str | None) -> None:
    """Record today's completion of a habit."""

    completion = app.habit_service.complete_habit(habit_id, notes=notes)
    if completion is None:
        click.echo("Already completed today.")
    else:
        click.echo(f"Completed habit {habit_id} at {completion.completed_at:%Y-%m-%d %H:%M}")


@cli.command("stats")
@click.argument("habit_id", type=int)
@pass_app
@_user_errors
def stats(app: AppContext, habit_id: int) -> None:
    """Print streaks and the completion heatmap for a habit."""

    data = app.habit_service.streak_data(habit_id)
    click.echo(f"Current streak: {data.current}")
    click.echo(f"Longest streak: {data.longest}")
    click.echo(f"Completions: {int(data.completion_rate)}")
    for cell in data.heatmap_data:
        click.echo(f"{cell.date}  {'#' * min(cell.count, 10)} {cell.count}")


@cli.command("archive")
@click.argument("habit_id", type=int)
@pass_app
@_user_errors
def archive(app: AppContext, habit_id: int) -> None:
    """Archive a habit so it no longer shows as active."""

    habit = app.habit_service.archive_habit(habit_id)
    click.echo(f"Archived habit {habit.id}: {habit.title}")


@cli.command("seed-demo")
@pass_app
def seed_demo(app: AppContext) -> None:
    """Create demo habits when none exist."""

    created = app.habit_service.seed_demo_habits()
    if created:
        click.echo(f"Seeded {len(created)} demo habits.")
    else:
        click.echo("Habits already exist; nothing seeded.")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
