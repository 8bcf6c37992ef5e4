#!/usr/bin/env python3
"""
Proposal Desk command-line tool.

Offline helpers for the campaign team:
1. KPI table for a file of influencers and a selection
2. Per-influencer and total budget of a proposal draft
3. Wizard gating and submit checks over a proposal draft
4. Serving the HTTP API
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from proposal_desk.backend.core.kpi import aggregate_kpis
from proposal_desk.backend.core.utils.config import get_default_config, load_config
from proposal_desk.backend.core.utils.formatting import format_currency, format_followers
from proposal_desk.backend.core.utils.logging_setup import level_from_name, setup_logging
from proposal_desk.backend.core.wizard import (
    WizardStep,
    influencer_cost,
    submit_problems,
    total_budget,
    transition_problems,
)
from proposal_desk.backend.schemas import Influencer, ProposalDraft

console = Console()
logger = logging.getLogger(__name__)


def print_banner():
    """Print the project banner."""
    banner = """
╔══════════════════════════════════════════════════════════════════════════════╗
║     Proposal Desk                                                            ║
║                                                                              ║
║     Campaign KPIs, proposal checks and budgets                               ║
╚══════════════════════════════════════════════════════════════════════════════╝
    """
    console.print(banner, style="bold blue")


def _read_document(path: str) -> Any:
    """YAML or JSON file contents (JSON is valid YAML)."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def _load_influencers(path: str) -> list[Influencer]:
    doc = _read_document(path)
    raw = doc.get("influencers", []) if isinstance(doc, dict) else doc
    return [Influencer.model_validate(item) for item in raw or []]


def _load_draft(path: str) -> ProposalDraft:
    return ProposalDraft.model_validate(_read_document(path) or {})


def _fail(label: str, exc: Exception, debug: bool) -> NoReturn:
    console.print(f"\n[bold red]{label}:[/bold red] {exc}")
    logger.debug("Command failed", exc_info=exc)
    if debug:
        raise exc
    raise SystemExit(1) from exc


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to configuration file (built-in defaults when omitted).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode with additional logging.",
)
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool, debug: bool):
    """
    Proposal Desk: campaign KPI and proposal tooling.

    Computes the same KPIs, budgets and wizard checks as the admin
    frontend, from local YAML/JSON files, and serves them over HTTP.
    """
    try:
        cfg = load_config(config) if config else get_default_config()
    except (FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"\n[bold red]Configuration error:[/bold red] {e}")
        raise SystemExit(1) from e

    log_cfg = cfg.get("logging", {})
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = level_from_name(log_cfg.get("level"), logging.WARNING)
        log_level = max(log_level, logging.WARNING)
    setup_logging(log_level, log_cfg.get("file"))

    ctx.obj = {"config": cfg, "config_path": config, "debug": debug}


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--select",
    "-s",
    "selected",
    multiple=True,
    help="Influencer id to include. Can be specified multiple times (default: all).",
)
@click.pass_obj
def kpis(obj: dict, file: str, selected: tuple[str, ...]):
    """Print campaign KPIs for the influencers in FILE."""
    try:
        influencers = _load_influencers(file)
    except (yaml.YAMLError, ValidationError, AttributeError, TypeError) as e:
        _fail("Invalid influencer file", e, obj["debug"])

    selection = frozenset(selected) if selected else frozenset(inf.id for inf in influencers)
    unknown = selection - {inf.id for inf in influencers}
    if unknown:
        console.print(f"[yellow]Ignoring unknown ids:[/yellow] {', '.join(sorted(unknown))}")

    result = aggregate_kpis(influencers, selection)

    table = Table(title=f"Campaign KPIs ({len(selection - unknown)} of {len(influencers)} selected)")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total followers", format_followers(result.total_followers))
    table.add_row("Avg engagement", f"{result.avg_engagement_rate:.2f}%")
    table.add_row("Estimated reach", format_followers(int(result.estimated_reach)))
    table.add_row("Total cost", format_currency(result.total_cost))
    table.add_row(
        "Gender split",
        f"{result.gender_split.male:.0f}% M / {result.gender_split.female:.0f}% F",
    )
    table.add_row("Top location", result.avg_location)
    console.print(table)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def budget(obj: dict, file: str):
    """Print per-influencer and total budget of the draft in FILE."""
    try:
        draft = _load_draft(file)
    except (yaml.YAMLError, ValidationError) as e:
        _fail("Invalid proposal file", e, obj["debug"])

    table = Table(title=draft.proposal_title or "Proposal budget")
    table.add_column("Influencer", style="cyan")
    table.add_column("Deliverables", justify="right")
    table.add_column("Cost", justify="right")
    for ip in draft.influencer_proposals:
        count = sum(d.quantity for d in ip.deliverables)
        table.add_row(f"@{ip.influencer.username}", str(count), format_currency(influencer_cost(ip)))
    table.add_row(
        "[bold]Total[/bold]", "", f"[bold]{format_currency(total_budget(draft.influencer_proposals))}[/bold]"
    )
    console.print(table)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def check(obj: dict, file: str):
    """Run wizard gating and submit checks over the draft in FILE."""
    try:
        draft = _load_draft(file)
    except (yaml.YAMLError, ValidationError) as e:
        _fail("Invalid proposal file", e, obj["debug"])

    stages = {
        "Details -> Influencers": transition_problems(draft, WizardStep.INFLUENCERS),
        "Influencers -> Review": transition_problems(draft, WizardStep.REVIEW),
        "Submit": submit_problems(draft),
    }

    table = Table(title="Proposal checks")
    table.add_column("Stage", style="cyan")
    table.add_column("Result")
    for stage, problems in stages.items():
        verdict = "[green]ok[/green]" if not problems else "[red]" + "; ".join(problems) + "[/red]"
        table.add_row(stage, verdict)
    console.print(table)

    if stages["Submit"]:
        console.print("\n[bold red]Proposal is not ready to submit.[/bold red]")
        raise SystemExit(1)
    console.print("\n[bold green]Proposal is ready to submit.[/bold green]")


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", "-p", type=int, default=8100, show_default=True, help="Bind port.")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes.")
@click.pass_obj
def serve(obj: dict, host: str, port: int, reload: bool):
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from proposal_desk.backend.api.app import create_app

    print_banner()
    console.print(f"  Upstream API: {obj['config']['api'].get('base_url')}")
    console.print(f"  Listening on: http://{host}:{port}")

    if reload:
        uvicorn.run("proposal_desk.backend.api.app:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(create_app(obj["config"]), host=host, port=port)


if __name__ == "__main__":
    main()
