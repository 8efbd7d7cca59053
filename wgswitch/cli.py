"""Command line interface for wgswitch."""

import functools
from pathlib import Path

import click

from .config import load_settings
from .dependencies import get_controller, get_diagnostics, get_settings, get_synchronizer
from .logging_utility import Logger, logger
from .vpn.exceptions import VPNError
from .vpn.models import LatencyResult, TransitionResult


ALIASES = {
    "g": "get",
    "l": "list",
    "c": "cc",
    "p": "ping",
    "w": "which",
    "e": "enable",
    "a": "start",
    "r": "restart",
    "i": "switch",
    "o": "stop",
    "d": "disable",
}


class AliasedGroup(click.Group):
    """Group that also accepts the single-letter command aliases."""

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


def prompt_override(current: str, target: str) -> bool:
    """Ask whether to replace the enabled profile; only 'y' or 'n' is accepted."""
    answer = click.prompt(
        f"{current} is currently enabled. Disable it and enable {target}? [y/n]",
        type=click.Choice(["y", "n"]),
        show_choices=False,
    )
    return answer == "y"


def handle_errors(func):
    """Turn VPNError into a click error (message on stderr, exit status 1)."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except VPNError as e:
            logger.error(f"{func.__name__} failed: {e}")
            raise click.ClickException(str(e))
    return wrapper


def echo_result(result: TransitionResult) -> None:
    for message in result.messages:
        click.echo(message)


def format_latency(result: LatencyResult) -> str:
    latency = f"{result.latency_ms:.1f} ms" if result.reachable else "unreachable"
    return f"{result.profile:<20} {result.host:<40} {latency}"


@click.group(cls=AliasedGroup)
@click.option("--config", "config_file", type=click.Path(dir_okay=False, path_type=Path),
              help="INI configuration file (default: $WGSWITCH_CONFIG or config/wgswitch.conf).")
@click.pass_context
def cli(ctx, config_file):
    """Manage WireGuard profiles run by wg-quick under systemd."""
    try:
        if config_file is not None:
            settings = load_settings(config_file)
            Logger().set_level(settings.log_level)
        else:
            settings = get_settings()
    except VPNError as e:
        raise click.ClickException(str(e))
    ctx.obj = settings


@cli.command("get")
@click.pass_obj
@handle_errors
def get_profiles(settings):
    """Fetch a fresh profile set, backing up the current one."""
    summary = get_synchronizer(settings).sync()
    if summary.backup_dir is not None:
        click.echo(f"Previous profiles moved to {summary.backup_dir}")
    click.echo(f"Fetched {len(summary.fetched)} profiles")


@cli.command("list")
@click.pass_obj
@handle_errors
def list_profiles(settings):
    """List available profiles."""
    for name in get_diagnostics(settings).list_profiles():
        click.echo(name)


@cli.command("cc")
@click.pass_obj
@handle_errors
def country_codes(settings):
    """List country codes of available profiles."""
    for code in sorted(get_diagnostics(settings).country_codes()):
        click.echo(code)


@cli.command("ping")
@click.argument("country_code", required=False, default="")
@click.pass_obj
@handle_errors
def ping(settings, country_code):
    """Rank the servers of a country by latency."""
    ranking = get_diagnostics(settings).latency_ranking(
        country_code,
        on_measurement=lambda result: click.echo(format_latency(result)),
    )
    click.echo("")
    click.echo("Ranking:")
    for result in ranking:
        click.echo(format_latency(result))


@cli.command("which")
@click.pass_obj
@handle_errors
def which(settings):
    """Show the enabled profile and whether it is running."""
    current, active = get_controller(settings).status()
    if current is None:
        click.echo("No profile enabled")
    else:
        click.echo(f"{current} ({'active' if active else 'inactive'})")


@cli.command("enable")
@click.argument("name", required=False, default="")
@click.pass_obj
@handle_errors
def enable(settings, name):
    """Enable a profile without starting it."""
    echo_result(get_controller(settings, confirm=prompt_override).enable(name))


@cli.command("start")
@click.argument("name", required=False, default="")
@click.pass_obj
@handle_errors
def start(settings, name):
    """Start the enabled profile, or enable and start NAME."""
    echo_result(get_controller(settings).start(name or None))


@cli.command("restart")
@click.argument("name", required=False, default="")
@click.pass_obj
@handle_errors
def restart(settings, name):
    """Restart the enabled profile, or enable and start NAME."""
    echo_result(get_controller(settings).restart(name or None))


@cli.command("switch")
@click.argument("name", required=False, default="")
@click.pass_obj
@handle_errors
def switch(settings, name):
    """Replace the enabled profile with NAME and start it."""
    echo_result(get_controller(settings).switch(name))


@cli.command("stop")
@click.pass_obj
@handle_errors
def stop(settings):
    """Stop the enabled profile."""
    echo_result(get_controller(settings).stop())


@cli.command("disable")
@click.pass_obj
@handle_errors
def disable(settings):
    """Disable the enabled profile, stopping it if it runs."""
    echo_result(get_controller(settings).disable())


def main():
    cli()


if __name__ == "__main__":
    main()
