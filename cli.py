#!/usr/bin/env python3
"""Command-line interface for the swing scoring engine."""

import json
import sys
from pathlib import Path

import click
import yaml


def load_config(config_path: str = "config/config.yaml") -> dict:
    """Load configuration from YAML file."""
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


def _echo_json(data: dict) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _setup(ctx: click.Context) -> None:
    from swing_scoring.utils.logging_config import setup_logging

    cfg = ctx.obj["config"]
    logging_cfg = cfg.get("logging", {})
    log_level = "DEBUG" if ctx.obj["verbose"] else logging_cfg.get("level", "WARNING")
    setup_logging(level=log_level, log_file=logging_cfg.get("file"))


def _pipeline(ctx: click.Context):
    from swing_scoring.pipeline.orchestrator import SwingScoringPipeline
    from swing_scoring.settings import config_from_dict

    cfg = ctx.obj["config"]
    try:
        engine_config = config_from_dict(cfg.get("engine"))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    workers = cfg.get("ingestion", {}).get("max_workers")
    return SwingScoringPipeline(engine_config, max_workers=workers)


@click.group()
@click.option(
    "--config",
    "-c",
    default="config/config.yaml",
    help="Path to configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool) -> None:
    """Swing Performance Scoring & Prediction Engine.

    Score vendor batted-ball exports and biomechanical uploads from the
    command line. Reports are printed as JSON.
    """
    ctx.ensure_object(dict)

    cfg = load_config(config)
    ctx.obj["config"] = cfg
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--breakdown/--no-breakdown",
    default=False,
    help="Include the Ball Score component breakdown",
)
@click.pass_context
def session(ctx: click.Context, files: tuple, breakdown: bool) -> None:
    """Compute session statistics from vendor CSV exports."""
    from swing_scoring.exceptions import EmptyInputError
    from swing_scoring.grading.grades import format_score

    _setup(ctx)

    with _pipeline(ctx) as pipeline:
        try:
            result = pipeline.import_sessions(files)
        except EmptyInputError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        output = result.to_dict()
        output["ball_score_display"] = format_score(result.stats.ball_score)
        if breakdown:
            output["ball_score_breakdown"] = pipeline.ball_score_breakdown(result.stats)

    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
    for source, message in result.failed_files.items():
        click.echo(f"Failed: {source}: {message}", err=True)

    _echo_json(output)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def biomech(ctx: click.Context, file: str) -> None:
    """Score biomechanical uploads from a JSON file.

    FILE holds a list of upload objects, or an object with an "uploads" list.
    """
    _setup(ctx)

    with open(file, encoding="utf-8") as f:
        data = json.load(f)
    uploads = data.get("uploads", []) if isinstance(data, dict) else data

    with _pipeline(ctx) as pipeline:
        try:
            report = pipeline.build_report(samples=uploads)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    if not report.biomechanics:
        click.echo(f"Error: {report.brain.reason}", err=True)
        sys.exit(1)

    _echo_json(report.to_dict())


@cli.command()
@click.option("--bat-speed", required=True, type=float, help="Bat speed (mph)")
@click.option("--attack-angle", required=True, type=float, help="Attack angle (degrees)")
@click.option("--hand-speed", required=True, type=float, help="Hand speed (mph)")
@click.option("--time-to-contact", required=True, type=float, help="Time to contact (ms)")
@click.option("--tempo", required=True, type=float, help="Tempo score (0-100)")
@click.option("--efficiency", required=True, type=float, help="Efficiency rating (0-10)")
@click.option("--peak-accel", type=float, help="Peak acceleration (g)")
@click.option("--profile", help="Sensor motor profile prediction")
@click.pass_context
def swing(
    ctx: click.Context,
    bat_speed: float,
    attack_angle: float,
    hand_speed: float,
    time_to_contact: float,
    tempo: float,
    efficiency: float,
    peak_accel: float,
    profile: str,
) -> None:
    """Classify a single swing and project its ceiling."""
    from swing_scoring.records.models import MotorProfile, SwingMetrics

    _setup(ctx)

    try:
        metrics = SwingMetrics(
            bat_speed_mph=bat_speed,
            attack_angle_deg=attack_angle,
            hand_speed_mph=hand_speed,
            time_to_contact_ms=time_to_contact,
            tempo_score=tempo,
            efficiency_rating=efficiency,
            peak_acceleration_g=peak_accel,
            motor_profile_prediction=MotorProfile.parse(profile) if profile else None,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    with _pipeline(ctx) as pipeline:
        analysis = pipeline.analyze_swing(metrics)

    _echo_json(analysis.to_dict())


@cli.command("check-config")
@click.pass_context
def check_config(ctx: click.Context) -> None:
    """Validate the weight tables of the configuration."""
    from swing_scoring.settings import config_from_dict, validate_weights

    _setup(ctx)

    errors = validate_weights(config_from_dict(ctx.obj["config"].get("engine"), validate=False))
    if errors:
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)
    click.echo("Configuration OK")


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from swing_scoring import __version__

    click.echo("Swing Performance Scoring & Prediction Engine")
    click.echo(f"Version: {__version__}")


if __name__ == "__main__":
    cli()
