"""
Concept Market Intelligence: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the industry catalog and/or the portfolio store.
  4. Run the engine.
  5. Report the result to stdout.

Install and run::

    pip install -e .
    market-intel --help
    market-intel validate-config
    market-intel match --title "Night Shift" --genre Horror --format "Feature Film" --quality 85
    market-intel seed-demo
    market-intel portfolio-summary
    market-intel diversification
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from market_intel.taxonomy.industry_taxonomy import CandidateRole, ConceptStatus

app = typer.Typer(
    name="market-intel",
    help="Buyer/producer matching and portfolio analytics for film and TV concepts.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from market_intel.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from market_intel.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_catalog_or_exit(config):
    """Load the industry catalog named by ``config.catalog.catalog_dir``."""
    from market_intel.catalog.loader import load_catalog
    from market_intel.config import resolve_path

    catalog_dir = resolve_path(config.catalog.catalog_dir)
    try:
        return load_catalog(catalog_dir)
    except Exception as exc:
        typer.echo(f"[ERROR] Could not load catalog from {catalog_dir}: {exc}", err=True)
        raise typer.Exit(code=1)


def _open_store(config, portfolio_path: Optional[str] = None):
    from market_intel.config import resolve_path
    from market_intel.portfolio.store import JsonPortfolioStore

    return JsonPortfolioStore(resolve_path(portfolio_path or config.portfolio.store_path))


def _parse_date_or_exit(value: Optional[str]) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"[ERROR] Invalid date '{value}' (expected YYYY-MM-DD).", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    buyer = config.scoring.weights["buyer"]
    producer = config.scoring.weights["producer"]
    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog dir:      {config.catalog.catalog_dir}")
    typer.echo(f"  Portfolio store:  {config.portfolio.store_path}")
    typer.echo(f"  Buyer weights:    {', '.join(f'{k}={v:.2f}' for k, v in buyer.items())}")
    typer.echo(f"  Producer weights: {', '.join(f'{k}={v:.2f}' for k, v in producer.items())}")
    typer.echo(f"  Match threshold:  {config.scoring.min_overall_score} (top {config.scoring.top_n})")
    typer.echo(f"  Canonical genres: {len(config.diversification.canonical_genres)}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("match")
def match(
    title: str = typer.Option(..., "--title", help="Concept working title."),
    genre: str = typer.Option(..., "--genre", help="Primary genre, e.g. Horror."),
    format: str = typer.Option("Feature Film", "--format", help="Requested format."),
    quality: float = typer.Option(..., "--quality", help="Concept quality score (0-100)."),
    tone: str = typer.Option("", "--tone", help="Tone descriptor."),
    audience: str = typer.Option("", "--audience", help="Target audience."),
    role: CandidateRole = typer.Option(
        CandidateRole.BUYER,
        "--role",
        case_sensitive=False,
        help="Rank buyers or producers.",
    ),
    top: Optional[int] = typer.Option(None, "--top", help="Override top-N from config."),
    json_out: Optional[str] = typer.Option(None, "--json-out", help="Write matches as JSON."),
    csv_out: Optional[str] = typer.Option(None, "--csv-out", help="Write matches as CSV."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rank catalog buyers or producers for one concept."""
    from pydantic import ValidationError

    from market_intel.errors import MarketIntelError
    from market_intel.matching.composite import CompositeScorer
    from market_intel.models.concept import Concept
    from market_intel.reporting.export import write_matches_csv, write_matches_json
    from market_intel.reporting.formatters import format_match_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config)

    try:
        concept = Concept(
            concept_id="cli",
            title=title,
            genre=genre,
            format=format,
            tone=tone,
            target_audience=audience,
            quality_score=quality,
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid concept: {exc}", err=True)
        raise typer.Exit(code=1)

    scoring = config.scoring
    if top is not None:
        scoring = scoring.model_copy(update={"top_n": max(0, top)})

    try:
        scorer = CompositeScorer(scoring, catalog)
    except MarketIntelError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    matches = scorer.rank(concept, catalog.candidates, catalog.activity, role=role)
    typer.echo(format_match_table(concept, matches, role))

    if json_out:
        path = write_matches_json(concept, matches, Path(json_out))
        typer.echo(f"\n[OK] JSON written: {path}")
    if csv_out:
        path = write_matches_csv(matches, Path(csv_out))
        typer.echo(f"[OK] CSV written: {path}")


@app.command("portfolio-summary")
def portfolio_summary(
    portfolio_path: Optional[str] = typer.Option(
        None, "--portfolio", help="Portfolio JSON file (default from config)."
    ),
    as_of: Optional[str] = typer.Option(
        None, "--as-of", help="Analysis date YYYY-MM-DD (default: today)."
    ),
    json_out: Optional[str] = typer.Option(None, "--json-out", help="Write the report as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Summarise portfolio health and print strategic recommendations."""
    from market_intel.portfolio.engine import PortfolioAnalyzer
    from market_intel.reporting.export import write_portfolio_report_json
    from market_intel.reporting.formatters import (
        format_portfolio_summary,
        format_recommendations,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    today = _parse_date_or_exit(as_of)
    catalog = _load_catalog_or_exit(config)
    portfolio = _open_store(config, portfolio_path).load()

    report = PortfolioAnalyzer.from_config(config, catalog).summarize(portfolio, today)
    typer.echo(format_portfolio_summary(report.summary))
    if report.recommendations:
        typer.echo(format_recommendations(report.recommendations))

    if json_out:
        path = write_portfolio_report_json(report, Path(json_out))
        typer.echo(f"\n[OK] JSON written: {path}")


@app.command("diversification")
def diversification(
    portfolio_path: Optional[str] = typer.Option(
        None, "--portfolio", help="Portfolio JSON file (default from config)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Show the genre distribution and entropy score of the portfolio."""
    from market_intel.portfolio.diversification import DiversificationAnalyzer
    from market_intel.reporting.formatters import format_diversification

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config)
    portfolio = _open_store(config, portfolio_path).load()

    analysis = DiversificationAnalyzer(config.diversification, catalog).analyze(portfolio)
    typer.echo(format_diversification(analysis))


@app.command("add-concept")
def add_concept(
    title: str = typer.Option(..., "--title", help="Concept working title."),
    genre: str = typer.Option(..., "--genre", help="Primary genre."),
    score: float = typer.Option(..., "--score", help="Analysis score (0-100)."),
    format: str = typer.Option("Feature Film", "--format", help="Format label."),
    logline: str = typer.Option("", "--logline", help="One-sentence pitch."),
    status: ConceptStatus = typer.Option(
        ConceptStatus.DEVELOPING, "--status", case_sensitive=False, help="Lifecycle status."
    ),
    portfolio_path: Optional[str] = typer.Option(
        None, "--portfolio", help="Portfolio JSON file (default from config)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Add a new concept (version 1) to the portfolio."""
    from pydantic import ValidationError

    from market_intel.portfolio.history import find_concept, new_portfolio_concept

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    store = _open_store(config, portfolio_path)
    portfolio = store.load()

    try:
        concept = new_portfolio_concept(
            title, genre, score, datetime.now(tz=timezone.utc),
            logline=logline, format=format, status=status,
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid concept: {exc}", err=True)
        raise typer.Exit(code=1)

    if find_concept(portfolio, concept.concept_id) is not None:
        typer.echo(f"[ERROR] Concept id '{concept.concept_id}' already exists.", err=True)
        raise typer.Exit(code=1)

    if not store.save([*portfolio, concept]):
        typer.echo(f"[ERROR] Could not write {store.path}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[OK] Added '{concept.title}' as {concept.concept_id} ({len(portfolio) + 1} concepts).")


@app.command("rescore")
def rescore(
    concept_id: str = typer.Option(..., "--concept-id", help="Concept to rescore."),
    score: float = typer.Option(..., "--score", help="New analysis score (0-100)."),
    portfolio_path: Optional[str] = typer.Option(
        None, "--portfolio", help="Portfolio JSON file (default from config)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Record a re-analysis score; history is appended, never rewritten."""
    from pydantic import ValidationError

    from market_intel.portfolio.history import find_concept, record_rescore, replace_concept

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    store = _open_store(config, portfolio_path)
    portfolio = store.load()

    concept = find_concept(portfolio, concept_id)
    if concept is None:
        typer.echo(f"[ERROR] No concept with id '{concept_id}'.", err=True)
        raise typer.Exit(code=1)

    try:
        updated = record_rescore(concept, score, datetime.now(tz=timezone.utc))
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid score: {exc}", err=True)
        raise typer.Exit(code=1)

    if not store.save(replace_concept(portfolio, updated)):
        typer.echo(f"[ERROR] Could not write {store.path}", err=True)
        raise typer.Exit(code=1)

    latest = updated.score_history[-1]
    typer.echo(
        f"[OK] {updated.title}: v{latest.version} score {latest.score:.1f} "
        f"({latest.improvement:+.1f})"
    )


@app.command("seed-demo")
def seed_demo(
    seed: int = typer.Option(42, "--seed", help="Random seed for score histories."),
    force: bool = typer.Option(False, "--force", help="Overwrite a non-empty portfolio."),
    portfolio_path: Optional[str] = typer.Option(
        None, "--portfolio", help="Portfolio JSON file (default from config)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Write the eight-concept demo portfolio to the store."""
    from market_intel.demo.sample_portfolio import SeededPortfolioGenerator

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    store = _open_store(config, portfolio_path)

    existing = store.load()
    if existing and not force:
        typer.echo(
            f"[ERROR] {store.path} already holds {len(existing)} concepts; "
            "pass --force to overwrite.",
            err=True,
        )
        raise typer.Exit(code=1)

    concepts = SeededPortfolioGenerator(seed=seed).generate(datetime.now(tz=timezone.utc))
    if not store.save(concepts):
        typer.echo(f"[ERROR] Could not write {store.path}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[OK] Demo portfolio written: {store.path} ({len(concepts)} concepts)")


if __name__ == "__main__":
    app()
