"""CLI for the ``finance_analytics`` package.

Reads an exported movements file (CSV or JSON) and prints the same aggregates
the analytics view charts. Environment variables (``FA_TIMEZONE``,
``FA_HISTORY_MONTHS``, ``FINANCE_ANALYTICS_LOG_LEVEL``) are loaded from a
local ``.env`` using ``python-dotenv`` before any command runs. Business logic
lives in :mod:`finance_analytics.bucketing` and
:mod:`finance_analytics.summaries`; this module only parses arguments, loads
files, and formats output.
"""

from __future__ import annotations

import csv
import json
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .config import AnalyticsSettings, load_settings
from .errors import ConfigurationError, RecordError
from .logging_setup import configure_logging
from .models import DateRange

# ---- Small module-level helpers used by CLI commands -------------------------


def _load_rows(path: Path) -> list[dict[str, Any]] | None:
    """Load movement rows, reporting failures on stderr (``None`` on error)."""

    from .ingest import load_movements

    try:
        return load_movements(path)
    except FileNotFoundError:
        typer.echo(f"Error: File not found: {path}", err=True)
    except PermissionError:
        typer.echo(f"Error: Permission denied: {path}", err=True)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
    except (csv.Error, ValueError) as e:
        typer.echo(f"Error: Failed to parse {path}: {e}", err=True)
    except OSError as e:
        typer.echo(f"Error: Unexpected failure reading '{path}': {e}", err=True)
    return None


def _parse_day(value: str | None, *, option: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ConfigurationError(f"{option} must be YYYY-MM-DD, got {value!r}") from e


def _settings(ctx: typer.Context) -> AnalyticsSettings:
    if isinstance(ctx.obj, AnalyticsSettings):
        return ctx.obj
    return load_settings()


def _fmt(amount: Any) -> str:
    return f"{amount:.2f}"


# ---- Command handlers -------------------------------------------------------


def cmd_historical(
    path: Path,
    *,
    granularity: str,
    output_format: str,
    settings: AnalyticsSettings,
    history: DateRange | None = None,
) -> int:
    """Print the bucketed income/expense series for ``path``.

    When ``history`` is given only movements dated inside it are bucketed.
    ``table`` output is one ``<label>\\t<inflow>\\t<outflow>`` line per bucket;
    ``json`` output is the chart payload (``label``, ``inflowTotal``,
    ``outflowTotal``). A note about skipped rows goes to stderr.
    """

    from .bucketing import aggregate_detailed, to_payload
    from .models import Granularity

    try:
        gran = Granularity.parse(granularity)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        return 2

    rows = _load_rows(path)
    if rows is None:
        return 1

    result = aggregate_detailed(rows, gran, tz=settings.tz, date_range=history)
    if result.skipped:
        typer.echo(f"Skipped {result.skipped} malformed movement(s)", err=True)

    if output_format == "json":
        payload = [p.model_dump(by_alias=True) for p in to_payload(result.buckets)]
        typer.echo(json.dumps(payload, ensure_ascii=False))
    else:
        for b in result.buckets:
            typer.echo(f"{b.label}\t{_fmt(b.inflow_total)}\t{_fmt(b.outflow_total)}")
    return 0


def cmd_categories(
    path: Path,
    *,
    kind: str,
    start: date | None,
    end: date | None,
    today: date,
    settings: AnalyticsSettings,
) -> int:
    """Print per-category totals for ``kind`` over a date range.

    The range defaults to month-to-date relative to ``today``.
    """

    from .normalizers import parse_kind
    from .summaries import default_report_range, sum_by_category

    try:
        movement_kind = parse_kind(kind)
        default = default_report_range(today)
        date_range = DateRange(start=start or default.start, end=end or default.end)
    except (RecordError, ConfigurationError) as e:
        typer.echo(f"Error: {e}", err=True)
        return 2

    rows = _load_rows(path)
    if rows is None:
        return 1

    breakdown = sum_by_category(rows, kind=movement_kind, date_range=date_range, tz=settings.tz)
    for name, value in breakdown.items:
        typer.echo(f"{name}\t{_fmt(value)}")
    typer.echo(f"Total\t{_fmt(breakdown.total)}")
    return 0


def cmd_totals(
    path: Path,
    *,
    start: date | None,
    end: date | None,
    today: date,
    settings: AnalyticsSettings,
) -> int:
    """Print income, expense and net totals over a date range."""

    from .summaries import default_report_range, period_totals

    try:
        default = default_report_range(today)
        date_range = DateRange(start=start or default.start, end=end or default.end)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        return 2

    rows = _load_rows(path)
    if rows is None:
        return 1

    totals = period_totals(rows, date_range, tz=settings.tz)
    typer.echo(f"Range\t{date_range.start.isoformat()}..{date_range.end.isoformat()}")
    typer.echo(f"Income\t{_fmt(totals.inflow_total)}")
    typer.echo(f"Expenses\t{_fmt(totals.outflow_total)}")
    typer.echo(f"Net\t{_fmt(totals.net)}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Aggregate exported income/expense movements (CSV or JSON). "
        "Loads FA_* settings from a local .env before running."
    ),
)

# Module-level option object shared by every command (ruff B008).
FILE_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--file",
    "-f",
    help="Path to a movements export (.csv or .json)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)
_START_HELP = "Range start (YYYY-MM-DD)."
_END_HELP = "Range end (YYYY-MM-DD)."
_TODAY_HELP = "Reference day for default ranges (YYYY-MM-DD). Defaults to now."


def _reference_day(today: str | None, settings: AnalyticsSettings) -> date:
    return _parse_day(today, option="--today") or datetime.now(settings.tz).date()


@app.command("historical")
def historical_cmd(
    ctx: typer.Context,
    path: Annotated[Path, FILE_OPTION],
    *,
    granularity: str = typer.Option(
        "monthly", "--granularity", "-g", help="Bucket size: daily, weekly or monthly."
    ),
    output_format: str = typer.Option("table", "--format", help="Output format: table or json."),
    recent: bool = typer.Option(
        False,
        "--recent/--all",
        help="Only bucket movements since FA_HISTORY_MONTHS months before --today.",
    ),
    today: str | None = typer.Option(None, "--today", help=_TODAY_HELP),
) -> None:
    """Print the trailing income/expense series by day, week, or month."""

    from .summaries import history_start

    if output_format not in {"table", "json"}:
        typer.echo(f"Error: unknown format: {output_format!r}", err=True)
        raise typer.Exit(2)
    settings = _settings(ctx)
    history = None
    if recent:
        try:
            ref = _reference_day(today, settings)
        except ConfigurationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(2) from e
        history = DateRange(start=history_start(ref, settings.history_months), end=ref)
    raise typer.Exit(
        cmd_historical(
            path,
            granularity=granularity,
            output_format=output_format,
            settings=settings,
            history=history,
        )
    )


@app.command("categories")
def categories_cmd(
    ctx: typer.Context,
    path: Annotated[Path, FILE_OPTION],
    *,
    kind: str = typer.Option("expense", "--kind", "-k", help="income or expense."),
    start: str | None = typer.Option(None, "--start", help=_START_HELP),
    end: str | None = typer.Option(None, "--end", help=_END_HELP),
    today: str | None = typer.Option(None, "--today", help=_TODAY_HELP),
) -> None:
    """Print totals per category (month-to-date unless a range is given)."""

    settings = _settings(ctx)
    try:
        start_day = _parse_day(start, option="--start")
        end_day = _parse_day(end, option="--end")
        ref = _reference_day(today, settings)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e
    raise typer.Exit(
        cmd_categories(
            path, kind=kind, start=start_day, end=end_day, today=ref, settings=settings
        )
    )


@app.command("totals")
def totals_cmd(
    ctx: typer.Context,
    path: Annotated[Path, FILE_OPTION],
    *,
    start: str | None = typer.Option(None, "--start", help=_START_HELP),
    end: str | None = typer.Option(None, "--end", help=_END_HELP),
    today: str | None = typer.Option(None, "--today", help=_TODAY_HELP),
) -> None:
    """Print income, expense and net totals (month-to-date by default)."""

    settings = _settings(ctx)
    try:
        start_day = _parse_day(start, option="--start")
        end_day = _parse_day(end, option="--end")
        ref = _reference_day(today, settings)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e
    raise typer.Exit(cmd_totals(path, start=start_day, end=end_day, today=ref, settings=settings))


@app.callback()
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables), validates settings, and configures
    logging for the package.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        settings = load_settings()
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e

    # Central logging setup so child loggers inherit configuration
    configure_logging(settings.log_level, force=True)
    ctx.obj = settings


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m finance_analytics.cli`
    main()
