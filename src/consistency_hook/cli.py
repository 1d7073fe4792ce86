"""CLI entrypoint for the post-release consistency hook."""

import logging
import os
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from consistency_hook.config import (
    LOG_LEVELS,
    HookConfig,
    ReleaseConfig,
    load_hook_config,
    load_release_config,
    resolve_log_level,
)
from consistency_hook.constants import DEFAULT_REPORTS_DIR, ENV_PREFIX
from consistency_hook.errors import ConfigError
from consistency_hook.hook import ConsistencyHook
from consistency_hook.lifecycle import build_post_release_hooks
from consistency_hook.report import print_history

# Load .env file on CLI startup
load_dotenv()


def _configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)


def _apply_release_log_level(ctx: click.Context, release: ReleaseConfig) -> None:
    # Flag and environment take precedence over the file
    if ctx.obj.get("log_level_explicit"):
        return
    logging.getLogger().setLevel(LOG_LEVELS[release.options.log_level.upper()])


def _resolve_hook_config(
    ctx: click.Context,
    config_file: Optional[str],
    **overrides,
) -> HookConfig:
    """Hook settings from the release file's first `format` entry, if any."""
    if not config_file:
        return load_hook_config(**overrides)

    release = load_release_config(Path(config_file))
    _apply_release_log_level(ctx, release)
    for entry in release.post_release:
        if entry.get("kind") == "format":
            return release.hook_config(entry, **overrides)
    return release.hook_config({"kind": "format"}, **overrides)


@click.group()
@click.version_option(package_name="consistency-hook")
@click.option(
    "--log-level",
    type=click.Choice(sorted(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Logging level (default: $CONSISTENCY_HOOK_LOG_LEVEL or INFO).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]):
    """Post-release formatting check, repair and auto-commit."""
    ctx.ensure_object(dict)
    ctx.obj["log_level_explicit"] = bool(log_level or os.environ.get(ENV_PREFIX + "LOG_LEVEL"))
    try:
        _configure_logging(resolve_log_level(log_level))
    except ConfigError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
        raise SystemExit(1)


@cli.command()
@click.option("--config", "config_file", type=click.Path(), help="Release config (.yaml/.json).")
@click.option("--repo", type=click.Path(file_okay=False), help="Repository working directory.")
@click.option("--remote", default=None, help="Remote to push the formatting commit to.")
@click.option("--branch", default=None, help="Branch to push the formatting commit to.")
@click.option("--report-dir", type=click.Path(file_okay=False), default=None,
              help="Write a JSON report of the run to this directory.")
@click.pass_context
def run(ctx: click.Context, config_file, repo, remote, branch, report_dir):
    """Run the formatting consistency hook once."""
    try:
        config = _resolve_hook_config(
            ctx,
            config_file,
            push_remote=remote,
            push_branch=branch,
            report_dir=report_dir,
        )
    except ConfigError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
        raise SystemExit(1)

    hook = ConsistencyHook(config=config, cwd=repo)
    outcome = hook.run()
    click.echo(f"Outcome: {outcome.value}")


@cli.command("post-release")
@click.option("--config", "config_file", required=True, type=click.Path(),
              help="Release config (.yaml/.json).")
@click.option("--repo", type=click.Path(file_okay=False), help="Repository working directory.")
@click.pass_context
def post_release(ctx: click.Context, config_file, repo):
    """Run every configured post-release hook in order."""
    try:
        release = load_release_config(Path(config_file))
        _apply_release_log_level(ctx, release)
        hooks = build_post_release_hooks(release, cwd=repo)
    except ConfigError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
        raise SystemExit(1)

    if not len(hooks):
        click.echo("No post-release hooks configured.")
        return

    for name, result in hooks.run_all():
        outcome = getattr(result, "value", result)
        click.echo(f"  {name}: {outcome if outcome is not None else 'failed'}")


@cli.command("check-config")
@click.option("--config", "config_file", type=click.Path(), help="Release config (.yaml/.json).")
@click.pass_context
def check_config(ctx: click.Context, config_file):
    """Validate configuration and show the resolved hook settings."""
    try:
        config = _resolve_hook_config(ctx, config_file)
    except ConfigError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
        raise SystemExit(1)

    click.echo("Configuration loaded successfully!")
    click.echo(f"  check_command:  {' '.join(config.check_command)}")
    click.echo(f"  apply_command:  {' '.join(config.apply_command)}")
    click.echo(f"  commit_message: {config.commit_message}")
    click.echo(f"  push target:    {config.push_remote}/{config.push_branch}")
    click.echo(f"  stop on commit error: {config.stop_on_commit_error}")
    click.echo(f"  report_dir:     {config.report_dir or '[not set]'}")


@cli.command()
@click.option("--report-dir", type=click.Path(file_okay=False), default=None,
              help=f"Directory holding hook reports (default: {DEFAULT_REPORTS_DIR}).")
@click.option("--limit", type=int, default=5, show_default=True, help="Runs to list.")
def history(report_dir, limit):
    """Show recent hook runs from their JSON reports."""
    if report_dir is None:
        report_dir = os.environ.get(ENV_PREFIX + "REPORT_DIR", DEFAULT_REPORTS_DIR)
    print_history(Path(report_dir), limit=limit)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
