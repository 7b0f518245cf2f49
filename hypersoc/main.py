"""
Hyper-SOC installer — CLI entrypoint.

Usage:
    hypersoc --help
    hypersoc install --dry-run
    hypersoc detect
    hypersoc check --config tools.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from hypersoc import __version__
from hypersoc.core.models.run_config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_CONFIG_URL,
    DEFAULT_LOG_PATH,
)
from hypersoc.core.observability.logging_config import setup_logging

_BANNER = r"""
  _   _                        ____   ___   ____
 | | | |_   _ _ __   ___ _ __ / ___| / _ \ / ___|
 | |_| | | | | '_ \ / _ \ '__|\___ \| | | | |
 |  _  | |_| | |_) |  __/ |    ___) | |_| | |___
 |_| |_|\__, | .__/ \___|_|   |____/ \___/ \____|
        |___/|_|
 Universal SOC Installer
"""


@click.group()
@click.version_option(version=__version__, prog_name="hypersoc")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """Hyper-SOC — provision a security-analyst workstation."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if debug:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    ctx.obj["log_level"] = level


def _setup_logging(ctx: click.Context, log_file: Path | None = None) -> None:
    level = ctx.obj.get("log_level", "INFO")
    setup_logging(level=level, log_file=log_file, quiet_third_party=level != "DEBUG")


@cli.command()
@click.option("--dry-run", is_flag=True, help="Simulate every action without changing the system.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the tool manifest.",
)
@click.option(
    "--config-url",
    default=DEFAULT_CONFIG_URL,
    help="Manifest to download when the local file is missing.",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    show_default=True,
    help="Append-only log file.",
)
@click.option(
    "--retries",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Extra attempts for a failed package install.",
)
@click.option("--skip-upgrade", is_flag=True, help="Refresh package indexes but don't upgrade the system.")
@click.option("--no-post-install", is_flag=True, help="Skip group and editor-extension setup.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the result as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    dry_run: bool,
    config_path: Path,
    config_url: str,
    log_path: Path,
    retries: int,
    skip_upgrade: bool,
    no_post_install: bool,
    as_json: bool,
) -> None:
    """Install every tool the manifest declares for this machine.

    Examples:

        sudo hypersoc install

        hypersoc install --dry-run

        sudo hypersoc install --config ./tools.json --retries 2
    """
    from hypersoc.core.models.run_config import RunConfig
    from hypersoc.core.reliability.retry import RetryPolicy
    from hypersoc.core.use_cases.install import run_install

    config = RunConfig(
        dry_run=dry_run,
        config_path=config_path,
        config_url=config_url,
        log_path=log_path,
        upgrade_system=not skip_upgrade,
        retry=RetryPolicy(max_attempts=retries + 1),
    )

    _setup_logging(ctx, log_file=config.log_path)
    if not as_json:
        click.secho(_BANNER, fg="cyan")

    result = run_install(config, post_install=not no_post_install)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(result.exit_code)

    summary = result.summary
    mode_label = "[dry-run] " if dry_run else ""
    click.echo()
    click.secho(f"⚡ {mode_label}Summary — {result.platform.label if result.platform else '?'}", fg="cyan", bold=True)
    click.echo(
        f"   Tools: {summary.total} | "
        f"✓ {summary.success} | ✗ {summary.failed} | ⊘ {summary.skipped} | ~ {summary.simulated}"
    )
    if summary.failed:
        click.secho(f"   Some tools failed — see {config.log_path}", fg="yellow")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the detected platform and available package managers."""
    from hypersoc.core.use_cases.detect import detect_environment

    _setup_logging(ctx)
    result = detect_environment()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    platform = result.platform
    if result.error or platform is None:
        click.secho(f"❌ {result.error or 'Platform could not be detected'}", fg="red")
        sys.exit(1)

    click.secho(f"\n🖥  {platform.label}", fg="cyan", bold=True)
    if platform.family:
        click.echo(f"   Package family: {platform.family}")
    elevated = "yes" if platform.is_elevated else "no"
    click.echo(f"   Elevated: {elevated}")
    click.echo()
    click.secho("   Backends:", fg="white", bold=True)
    for name, info in result.backends.items():
        icon = "✅" if info["present"] else "❌"
        click.echo(f"     {icon} {name} ({info['binary']})")
    click.echo()


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the tool manifest.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, config_path: Path, as_json: bool) -> None:
    """Validate a tool manifest without installing anything."""
    from hypersoc.core.use_cases.manifest_check import check_manifest

    _setup_logging(ctx)
    result = check_manifest(config_path)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    manifest = result.manifest
    if result.valid and manifest is not None:
        click.secho("✅ Manifest is valid", fg="green", bold=True)
        click.echo(f"   Linux packages: {manifest.linux.total}")
        click.echo(f"   Windows tools:  {len(manifest.windows)}")
    else:
        click.secho("❌ Manifest errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(1)


if __name__ == "__main__":
    cli()
