"""Command line front end for policy validation and rebalancer operations."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from config.settings import Settings, get_settings
from tokenlaw.core.errors import NotInitializedError, TokenLawError
from tokenlaw.core.models import (
    AllocationPolicy,
    AllocationSummary,
    InflationConfig,
    InflationState,
    RebalancerEvent,
)
from tokenlaw.factory import TokenFactory
from tokenlaw.persistence import create_store
from tokenlaw.policy import AllocationPolicyValidator

logger = logging.getLogger(__name__)


def _load_json(path: str) -> dict:
    with open(path, "r") as f:
        return json.load(f)


def _summary_table(summary: AllocationSummary) -> Table:
    table = Table(title="Allocation")
    table.add_column("Metric")
    table.add_column("Units", justify="right")
    table.add_row("Fixed supply", f"{summary.supply:,}")
    table.add_row("Explicit reserved", f"{summary.explicit_reserved:,}")
    table.add_row(f"Percentage reserved ({summary.percentage_bps} bps)", f"{summary.percentage_reserved:,}")
    table.add_row("Total reserved", f"{summary.total_reserved:,}")
    table.add_row("Unreserved", f"{summary.unreserved:,}")
    return table


def _state_table(config: InflationConfig, state: InflationState) -> Table:
    table = Table(title="Inflation rebalancer")
    table.add_column("Field")
    table.add_column("Value", justify="right")
    table.add_row("Mode", config.mode.kind.value)
    if config.is_oracle:
        table.add_row("Oracle", config.oracle_account)
    else:
        table.add_row("Hurdle (bps/yr)", str(config.fixed_hurdle_bps_annual))
    table.add_row("Status", state.status.value)
    table.add_row("Real return score (bps)", str(state.real_return_score_bps))
    table.add_row("Safety", f"{state.safety_weight_bps} / {config.safety_cap_bps}")
    table.add_row("Growth", f"{state.growth_weight_bps} / {config.growth_cap_bps}")
    table.add_row("Liquidity", f"{state.liquidity_weight_bps} / {config.liquidity_cap_bps}")
    table.add_row("Last rebalance (s)", str(state.last_rebalance_at_seconds))
    if state.last_index:
        ix = state.last_index
        table.add_row("Last index", f"{ix.index_id} {ix.period} = {ix.value_bps} bps @ {ix.posted_at_seconds}")
    return table


def _print_events(console: Console, events: List[RebalancerEvent]) -> None:
    for event in events:
        # one JSON object per line, never folded
        console.print(event.to_json(), markup=False, highlight=False, soft_wrap=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tokenlaw", description="Token allocation policy tools")
    parser.add_argument("--storage-dir", type=Path, default=None, help="Override storage directory")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Validate an allocation policy document")
    p.add_argument("policy", help="Policy JSON file")

    p = sub.add_parser("create", help="Validate a policy and register a token")
    p.add_argument("symbol")
    p.add_argument("account")
    p.add_argument("policy", help="Policy JSON file")
    p.add_argument("--inflation", help="Inflation rebalancer config JSON file")

    p = sub.add_parser("post-index", help="Post an inflation index sample as the oracle")
    p.add_argument("symbol")
    p.add_argument("caller")
    p.add_argument("index_id")
    p.add_argument("period")
    p.add_argument("value_bps", type=int)

    p = sub.add_parser("rebalance", help="Run one rebalance step")
    p.add_argument("symbol")

    p = sub.add_parser("show", help="Show a token's rebalancer config and state")
    p.add_argument("symbol")

    return parser


def run(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    if args.command == "validate":
        policy = AllocationPolicy.from_dict(_load_json(args.policy))
        summary = AllocationPolicyValidator.validate(policy)
        console.print(_summary_table(summary))
        console.print("[green]Policy valid[/green]")
        return 0

    if args.storage_dir is not None:
        settings = settings.model_copy(update={"storage_dir": args.storage_dir})
    factory = TokenFactory(create_store(settings))

    if args.command == "create":
        policy = AllocationPolicy.from_dict(_load_json(args.policy))
        inflation = InflationConfig.from_dict(_load_json(args.inflation)) if args.inflation else None
        record = factory.create_token(args.symbol, args.account, policy, inflation)
        console.print(_summary_table(record.allocation))
        console.print(f"[green]Created {record.symbol}[/green] -> {record.account}")
        return 0

    if factory.get_token(args.symbol) is None:
        console.print(f"[red]Unknown symbol:[/red] {args.symbol}")
        return 1
    rebalancer = factory.rebalancer_for(args.symbol)

    if args.command == "post-index":
        events = rebalancer.post_index(args.caller, args.index_id, args.period, args.value_bps)
        _print_events(console, events)
        return 0

    if args.command == "rebalance":
        events = rebalancer.rebalance()
        _print_events(console, events)
        return 0

    if args.command == "show":
        try:
            console.print(_state_table(rebalancer.get_config(), rebalancer.get_state()))
        except NotInitializedError:
            console.print(f"{args.symbol.upper()} has no inflation rebalancer")
        return 0

    return 1


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))

    args = build_parser().parse_args(argv)
    console = Console()
    try:
        return run(args, settings, console)
    except (TokenLawError, OSError, json.JSONDecodeError) as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        console.print(f"[red]Error:[/red] {e}", highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
