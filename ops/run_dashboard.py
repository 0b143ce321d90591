#!/usr/bin/env python3
"""
Election Results Dashboard with Click CLI

This script builds the dashboard artefacts from the results JSON and the
constituency boundary GeoJSON, with the ability to override configuration
values via command line arguments.

Usage:
    python -m ops.run_dashboard [OPTIONS] COMMAND

    # Build the enriched layer, summary table, seat chart and overview map:
    python -m ops.run_dashboard build

    # Print the party summary:
    python -m ops.run_dashboard summary

    # Drill into one constituency's wards (by name or number):
    python -m ops.run_dashboard drill "Lusaka Central"

    # Override config values:
    python -m ops.run_dashboard --config directories.output=build build

    # Verbose logging:
    python -m ops.run_dashboard --verbose build
"""

import json
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml
from loguru import logger

from dashboard.controller import DashboardSession, ViewStateController
from dashboard.errors import LoadFailure
from ops.config_loader import Config
from ops.repositories import BoundaryRepository, ResultRepository
from ops.repositories.spatial import ward_filename
from rendering import (
    build_overview_map,
    build_ward_map,
    format_summary,
    plot_seats_by_party,
    save_map,
    write_summary,
)

COLUMN_KEYS = ["constituency_id", "constituency_name", "district_name", "province_name", "ward_name"]


class ConfigContext:
    """Click context object for config management."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file
        self.overrides: Dict[str, Any] = {}
        self.config: Optional[Config] = None

    def add_override(self, key: str, value: Any):
        """Add config override using dot notation."""
        keys = key.split(".")
        current = self.overrides
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value
        logger.debug(f"Added override: {key} = {value}")

    def get_config(self) -> Config:
        """Get config with overrides applied."""
        config = Config(self.config_file)
        if self.overrides:
            self._apply_nested_override(config.data, self.overrides)
        return config

    def _apply_nested_override(self, base_dict: Dict, override_dict: Dict):
        """Apply nested overrides."""
        for key, value in override_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._apply_nested_override(base_dict[key], value)
            else:
                base_dict[key] = value


class ConfigOverride(click.ParamType):
    """Custom parameter type for config overrides."""

    name = "config_override"

    def convert(self, value, param, ctx) -> Tuple[str, Any]:
        if "=" not in value:
            self.fail(f"Invalid format: {value}. Use KEY=VALUE", param, ctx)

        key, val = value.split("=", 1)

        # Auto-parse value type
        if val.lower() in ("true", "false"):
            parsed_val: Any = val.lower() == "true"
        elif val.lstrip("-").isdigit():
            parsed_val = int(val)
        elif "." in val and val.lstrip("-").replace(".", "", 1).isdigit():
            parsed_val = float(val)
        else:
            parsed_val = val

        return key, parsed_val


def setup_logging(verbose: bool = False, enable_trace: bool = False) -> None:
    """
    Configure loguru logging with appropriate levels.

    Args:
        verbose: If True, set log level to DEBUG
        enable_trace: If True, enable TRACE level logging for deep debugging
    """
    logger.remove()

    if enable_trace:
        log_level = "TRACE"
        log_format = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
    elif verbose:
        log_level = "DEBUG"
        log_format = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
    else:
        log_level = "INFO"
        log_format = (
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
        )

    logger.add(
        sys.stderr,
        format=log_format,
        level=log_level,
        colorize=True,
        backtrace=enable_trace,
        diagnose=enable_trace,
    )


def column_names(config: Config) -> Dict[str, str]:
    return {key: config.get_column_name(key) for key in COLUMN_KEYS}


def load_session(config: Config) -> Tuple[DashboardSession, BoundaryRepository]:
    """
    Load results and boundaries into a DashboardSession.

    A results failure degrades to the no-data state; a boundary failure is
    recorded on the session and leaves the overview layer empty.
    """
    timeout = float(config.get_system_setting("request_timeout"))
    wards_location = None
    if config.get("input_files.wards_location"):
        wards_location = config.get_input_location("wards_location")
    boundaries = BoundaryRepository(
        constituencies_location=config.get_input_location("constituencies_geojson"),
        wards_location=wards_location,
        id_property=config.get_column_name("constituency_id"),
        name_property=config.get_column_name("constituency_name"),
        timeout=timeout,
    )
    controller = ViewStateController(
        ward_loader=boundaries.load_wards, initial_state=config.initial_view_state()
    )
    session = DashboardSession(
        controller=controller,
        resolver=config.get_color_resolver(),
        id_property=config.get_column_name("constituency_id"),
    )

    try:
        session.results_loaded(
            ResultRepository.load(config.get_input_location("results_json"), timeout=timeout)
        )
    except LoadFailure as e:
        logger.trace(traceback.format_exc())
        session.results_failed(e)

    try:
        session.boundaries_loaded(boundaries.load_constituencies())
    except LoadFailure as e:
        logger.trace(traceback.format_exc())
        session.boundaries_failed(e)

    return session, boundaries


@click.group()
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (defaults to DASHBOARD_CONFIG_PATH or config.yaml)",
)
@click.option(
    "--config",
    "config_overrides",
    multiple=True,
    type=ConfigOverride(),
    help="Set config values using dot notation (e.g., map.fit_padding=80)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable DEBUG level logging")
@click.option(
    "--trace", is_flag=True, help="Enable TRACE level logging for deep debugging (maximum detail)"
)
@click.option("--log-file", type=str, help="Also log to specified file")
@click.pass_context
def cli(ctx, config_file, config_overrides, verbose, trace, log_file):
    """
    Election Results Dashboard

    Join constituency boundaries with election results and produce the map,
    drill-down and summary views.

    \b
    Examples:
      python -m ops.run_dashboard build                       # Build all artefacts
      python -m ops.run_dashboard summary                     # Print the party summary
      python -m ops.run_dashboard drill "Lusaka Central"      # Ward drill-down map
      python -m ops.run_dashboard --log-file dashboard.log build
    """
    setup_logging(verbose=verbose, enable_trace=trace)
    logger.trace("🔍 Trace logging enabled - maximum detail mode")

    if log_file:
        log_level = "TRACE" if trace else ("DEBUG" if verbose else "INFO")
        logger.add(
            log_file,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
            rotation="10 MB",
            retention="7 days",
        )
        logger.info(f"📄 Also logging to file: {log_file}")

    config_ctx = ConfigContext(config_file)
    for key, value in config_overrides:
        config_ctx.add_override(key, value)

    try:
        config_ctx.config = config_ctx.get_config()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.critical(f"Configuration error: {e}")
        logger.info("💡 Make sure config.yaml exists and is valid")
        ctx.exit(1)

    logger.debug(f"📋 Project: {config_ctx.config.get('project_name')}")
    config_ctx.config.print_config_summary()
    ctx.obj = config_ctx


@cli.command()
@click.pass_context
def build(ctx):
    """Build the enriched layer, summary outputs and overview map."""
    config: Config = ctx.obj.config
    title = config.get_metadata("project_name") or "Election Results"
    logger.info(f"🗺️ {title}")
    logger.info("=" * len(f"🗺️ {title}"))

    session, _ = load_session(config)
    layer = session.overview_layer()
    if layer is None:
        logger.critical("❌ Constituency boundaries are required to build the dashboard")
        ctx.exit(1)

    output_dir = config.get_output_dir()
    layer_path = output_dir / "constituencies_results.geojson"
    with open(layer_path, "w", encoding="utf-8") as f:
        json.dump(layer, f)
    logger.success(f"  ✅ Enriched layer saved: {layer_path}")

    resolver = session.resolver
    results_summary = session.summary()
    if results_summary is None:
        logger.warning("⚠️ No election results available, skipping summary outputs")
    else:
        write_summary(results_summary, output_dir)
        plot_seats_by_party(results_summary, output_dir / "seats_by_party.png", resolver=resolver)

    overview = build_overview_map(
        layer,
        session.controller.state,
        column_names(config),
        resolver=resolver,
        tiles=config.get_map_setting("tiles"),
        fill_opacity=config.get_map_setting("fill_opacity"),
        hover_opacity=config.get_map_setting("hover_opacity"),
        title=title,
    )
    save_map(overview, output_dir / "overview_map.html")
    logger.success("🎉 Dashboard build complete")


@cli.command()
@click.pass_context
def summary(ctx):
    """Print seats and votes per party."""
    config: Config = ctx.obj.config
    timeout = float(config.get_system_setting("request_timeout"))
    try:
        results = ResultRepository.load(config.get_input_location("results_json"), timeout=timeout)
    except LoadFailure as e:
        logger.error(f"❌ Error loading election results: {e}")
        results = None

    session = DashboardSession()
    if results is not None:
        session.results_loaded(results)
    click.echo(format_summary(session.summary()))


@cli.command()
@click.argument("constituency")
@click.option("--json", "as_json", is_flag=True, help="Print the resulting view state as JSON")
@click.pass_context
def drill(ctx, constituency, as_json):
    """Drill into the wards of CONSTITUENCY (name or number)."""
    config: Config = ctx.obj.config
    session, boundaries = load_session(config)
    layer = session.overview_layer()
    if layer is None:
        logger.critical("❌ Constituency boundaries are required for a drill-down")
        ctx.exit(1)

    feature = boundaries.find_constituency(layer, constituency)
    if feature is None:
        logger.error(f"❌ No constituency matches {constituency!r}")
        ctx.exit(1)

    state = session.controller.select(feature["properties"])
    if as_json:
        click.echo(json.dumps(state.snapshot(), indent=2, default=str))

    if not state.drill_down_active:
        logger.error(f"❌ Drill-down cancelled: {state.last_error}")
        ctx.exit(1)

    name = str(feature["properties"].get(config.get_column_name("constituency_name"), constituency))
    ward_map = build_ward_map(
        state,
        column_names(config),
        tiles=config.get_map_setting("tiles"),
        fill_color=config.get_map_setting("ward_fill_color"),
        fill_opacity=config.get_map_setting("ward_fill_opacity"),
        line_color=config.get_map_setting("ward_line_color"),
    )
    stem = Path(ward_filename(name)).stem
    save_map(ward_map, config.get_output_dir() / f"wards_{stem}.html")


@cli.command()
@click.pass_context
def legend(ctx):
    """List the party colors used on the map."""
    for label, color in ctx.obj.config.get_color_resolver().legend():
        click.echo(f"{color}  {label}")


def main():
    cli(obj=None)


if __name__ == "__main__":
    main()
