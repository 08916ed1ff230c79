"""Command-line interface for the portfolio dashboard.

Provides read subcommands (`health`, `holdings`, `allocation`, `growth`,
`snapshots`, `summary`) that fetch records from the data API, run them
through the aggregation engine and print tables, plus write subcommands
(`add-holding`, `update-holding`, `delete-holding`, `add-growth`). Each
command is implemented as a `cmd_*` function that accepts an argparse
namespace and a client.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import Any, Callable

import pandas as pd
from dotenv import load_dotenv
from pydantic import ValidationError

from portfolio_dashboard.aggregate import (
    compute_max_variance,
    compute_portfolio_totals,
    compute_sector_breakdown,
    compute_snapshot_growth,
    compute_summary_statistics,
    compute_time_series,
    count_within,
    filter_by_account,
    filter_holdings,
    group_snapshots_by_date,
    last_n_points,
)
from portfolio_dashboard.aggregate.classify import POLICIES, TRI_STATE, TWO_TIER
from portfolio_dashboard.aggregate.frames import (
    breakdown_frame,
    growth_frame,
    holdings_frame,
    snapshot_days_frame,
)
from portfolio_dashboard.api.client import PortfolioApiClient, client_from_settings
from portfolio_dashboard.config import get_settings
from portfolio_dashboard.errors import ApiRequestError, InvalidPeriodKey
from portfolio_dashboard.formatting import (
    format_currency,
    format_date,
    format_frame,
    format_month,
    format_percent,
    format_signed_currency,
)
from portfolio_dashboard.logging_config import configure_logging
from portfolio_dashboard.models import CreateHoldingForm, MonthlyGrowthForm, UpdateHoldingForm

log = logging.getLogger(__name__)

HOLDING_FIELDS = ("symbol", "name", "sector", "qty", "avg_price", "current_price", "rsi", "allocation_pct", "notes")


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _emit(text: str = "") -> None:
    print(text)


def _kpi(label: str, value: str) -> None:
    _emit(f"{label:<24}{value}")


def _table(pdf: pd.DataFrame, empty_message: str) -> None:
    """Print a DataFrame without its index, or `empty_message` when empty."""
    if pdf.empty:
        _emit(empty_message)
    else:
        _emit(pdf.to_string(index=False))


def _holding_fields(args: argparse.Namespace) -> dict[str, Any]:
    """Collect holding options the user actually passed."""
    return {f: getattr(args, f) for f in HOLDING_FIELDS if getattr(args, f, None) is not None}


# --------------------------------------------------
# READ COMMANDS
# --------------------------------------------------
def cmd_health(_: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Print the data API liveness payload."""
    payload = client.health()
    _kpi("Status", str(payload.get("status", "unknown")))
    if payload.get("timestamp"):
        _kpi("Timestamp", str(payload["timestamp"]))


def cmd_holdings(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """List holdings (optionally filtered by `--search`) with totals."""
    holdings = filter_holdings(client.get_holdings(), args.search or "")
    log.info("Fetched %d holdings (search=%r)", len(holdings), args.search)

    totals = compute_portfolio_totals(holdings)
    _kpi("Total Invested", format_currency(totals.total_invested))
    _kpi("Current Value", format_currency(totals.total_value))
    _kpi("Total Gain/Loss", format_signed_currency(totals.total_gain_loss))
    _emit()

    pdf = format_frame(
        holdings_frame(holdings),
        currency=["avg_price", "current_price", "value", "gain_loss"],
        percent=["gain_loss_pct"],
    )
    empty = "No holdings match your search." if args.search else "No holdings found."
    _table(pdf, empty)


def cmd_allocation(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Compare actual sector allocation against the ideal allocation."""
    policy = POLICIES[args.policy]
    holdings = client.get_holdings()
    targets = client.get_ideal_allocation()

    rows = compute_sector_breakdown(holdings, targets)
    worst = compute_max_variance(rows)

    _kpi("Tracked Sectors", str(len(rows)))
    _kpi("Max Variance", f"{format_percent(abs(worst.variance))} ({worst.sector or 'N/A'})")
    _kpi("In Range", f"{count_within(rows, policy)}/{len(rows)} within ±2% target")
    _emit()

    pdf = format_frame(
        breakdown_frame(rows, policy),
        currency=["current_value", "target_value", "rebalance_amount"],
        percent=["variance"],
    )
    _table(pdf, "No allocation targets found.")


def cmd_growth(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Print monthly P&L statistics and the cumulative series."""
    entries = client.get_monthly_growth()
    if args.account:
        entries = filter_by_account(entries, args.account)

    stats = compute_summary_statistics(entries, current_year=datetime.now().year)
    points = compute_time_series(entries)
    if args.last is not None:
        points = last_n_points(points, args.last)

    _kpi("Total P&L", format_currency(stats.total_pnl))
    _kpi("YTD P&L", format_currency(stats.ytd_pnl))
    _kpi("Avg Monthly P&L", format_currency(stats.average_monthly_pnl))
    _kpi("Positive Months", f"{stats.positive_month_count} ({stats.success_rate_pct:.0f}% success rate)")
    _emit()

    pdf = growth_frame(list(reversed(points)))
    pdf["month"] = pdf["month"].map(format_month)
    _table(
        format_frame(pdf, currency=["pnl", "cumulative"], percent=[]),
        "No monthly growth data found.",
    )


def cmd_snapshots(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Print snapshot history; `--take` persists a new snapshot set first."""
    if args.take:
        created = client.create_snapshot()
        log.info("Created snapshot set with %d sector rows", len(created))

    days = group_snapshots_by_date(client.get_snapshots())
    growth, growth_pct = compute_snapshot_growth(days)
    latest = days[-1] if days else None

    _kpi("Total Snapshots", str(len(days)))
    if latest is not None:
        _kpi("Latest Value", f"{format_currency(latest.total_value)} ({format_date(latest.date)})")
        _kpi("Avg Variance", f"{latest.average_abs_variance:.1f}%")
    _kpi("Value Growth", f"{format_currency(growth)} ({format_percent(growth_pct)})")
    _emit()

    pdf = snapshot_days_frame(list(reversed(days)))
    _table(format_frame(pdf, currency=["total_value"], percent=[]), "No snapshots recorded yet.")

    if latest is not None:
        _emit()
        _emit(f"Latest snapshot ({latest.date}):")
        rows = pd.DataFrame(
            [
                {
                    "sector": r.sector,
                    "actual_pct": r.actual_pct,
                    "target_pct": r.target_pct,
                    "variance": r.variance,
                    "status": TRI_STATE.classify(r.variance).value,
                }
                for r in latest.rows
            ]
        )
        _table(format_frame(rows, currency=[], percent=["variance"]), "")


def cmd_summary(_: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Print the backend summary alongside engine-derived allocation."""
    summary = client.get_summary()
    holdings = client.get_holdings()
    targets = client.get_ideal_allocation()

    _kpi("Net Worth", format_currency(summary.current_net_worth))
    _kpi("Total Invested", format_currency(summary.total_invested))
    _kpi(
        "Unrealized P&L",
        f"{format_currency(summary.unrealized_gain_loss)} ({format_percent(summary.unrealized_pct)})",
    )
    _kpi("YTD Growth", format_currency(summary.ytd_growth))
    _emit()

    rows = compute_sector_breakdown(holdings, targets)
    alloc = breakdown_frame(rows, TWO_TIER)[["sector", "holding_count", "actual_pct", "target_pct", "variance"]]
    _table(format_frame(alloc, currency=[], percent=["variance"]), "No allocation targets found.")
    _emit()

    trend = growth_frame(compute_time_series(summary.monthly_trend))
    _table(format_frame(trend, currency=["pnl", "cumulative"], percent=[]), "No monthly trend data.")


# --------------------------------------------------
# WRITE COMMANDS
# --------------------------------------------------
def cmd_add_holding(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Validate and create a holding."""
    form = CreateHoldingForm.model_validate(_holding_fields(args))
    created = client.create_holding(form)
    log.info("Created holding %s (%s)", created.symbol, created.id)


def cmd_update_holding(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Send a partial update with only the options provided."""
    fields = _holding_fields(args)
    if not fields:
        raise SystemExit("update-holding: pass at least one field to change")
    form = UpdateHoldingForm.model_validate(fields)
    updated = client.update_holding(args.id, form)
    log.info("Updated holding %s (%s): %s", updated.symbol, updated.id, ", ".join(sorted(fields)))


def cmd_delete_holding(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    client.delete_holding(args.id)
    log.info("Deleted holding %s", args.id)


def cmd_add_growth(args: argparse.Namespace, client: PortfolioApiClient) -> None:
    """Validate and record a monthly P&L entry."""
    form = MonthlyGrowthForm(month=args.month, account=args.account, pnl=args.pnl)
    entry = client.create_monthly_growth(form)
    log.info("Recorded %s P&L for %s: %s", entry.month, entry.account, format_currency(entry.pnl))


COMMANDS: dict[str, Callable[[argparse.Namespace, PortfolioApiClient], None]] = {
    "health": cmd_health,
    "holdings": cmd_holdings,
    "allocation": cmd_allocation,
    "growth": cmd_growth,
    "snapshots": cmd_snapshots,
    "summary": cmd_summary,
    "add-holding": cmd_add_holding,
    "update-holding": cmd_update_holding,
    "delete-holding": cmd_delete_holding,
    "add-growth": cmd_add_growth,
}


# --------------------------------------------------
# CLI
# --------------------------------------------------
def _positive_int(text: str) -> int:
    n = int(text)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def _add_holding_options(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--symbol", required=required)
    p.add_argument("--name", required=required)
    p.add_argument("--sector", required=required)
    p.add_argument("--qty", type=float, required=required)
    p.add_argument("--avg-price", dest="avg_price", type=float, required=required)
    p.add_argument("--current-price", dest="current_price", type=float, required=required)
    p.add_argument("--rsi", type=float, default=None)
    p.add_argument("--allocation-pct", dest="allocation_pct", type=float, required=required)
    p.add_argument("--notes", default=None)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="portfolio-dashboard")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("health")

    p_holdings = sub.add_parser("holdings")
    p_holdings.add_argument("--search", default=None)

    p_alloc = sub.add_parser("allocation")
    p_alloc.add_argument("--policy", choices=sorted(POLICIES), default="two-tier")

    p_growth = sub.add_parser("growth")
    p_growth.add_argument("--account", default=None)
    p_growth.add_argument("--last", type=_positive_int, default=None)

    p_snap = sub.add_parser("snapshots")
    p_snap.add_argument("--take", action="store_true")

    sub.add_parser("summary")

    _add_holding_options(sub.add_parser("add-holding"), required=True)

    p_update = sub.add_parser("update-holding")
    p_update.add_argument("id")
    _add_holding_options(p_update, required=False)

    p_delete = sub.add_parser("delete-holding")
    p_delete.add_argument("id")

    p_add_growth = sub.add_parser("add-growth")
    p_add_growth.add_argument("--month", required=True)
    p_add_growth.add_argument("--account", required=True)
    p_add_growth.add_argument("--pnl", type=float, required=True)

    return p


def run(args: argparse.Namespace, client: PortfolioApiClient) -> int:
    """Dispatch `args.cmd` and map failures to exit codes.

    Returns:
        0 on success, 1 for data API errors, 2 for invalid input.
    """
    try:
        COMMANDS[args.cmd](args, client)
    except ApiRequestError as e:
        log.error("Data API request failed: %s", e.message)
        return 1
    except ValidationError as e:
        log.error("Invalid input:\n%s", e)
        return 2
    except InvalidPeriodKey as e:
        log.error("%s", e)
        return 2
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_file, settings.log_level)

    with client_from_settings(settings) as client:
        code = run(args, client)
    sys.exit(code)


if __name__ == "__main__":
    main()
