"""Reclaim CLI entrypoint.

Command-line interface for reclaiming a local model server's TCP port.
"""

from __future__ import annotations

import functools
import logging
import sys
from dataclasses import asdict
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from reclaim.domain.config import RunConfig

from reclaim.core.errors import ReclaimCliError, invalid_config_error, run_aborted_error
from reclaim.core.presentation.colors import ReclaimColors
from reclaim.core.progress import ConsoleStageReporter
from reclaim.domain.config import (
    DEFAULT_PORT,
    DEFAULT_REQUIRED_MODEL,
    DEFAULT_SERVICE_NAME,
)
from reclaim.domain.entities import OutcomeKind, ProbeStatus, RunOutcome
from reclaim.domain.exceptions import ReclaimDomainError
from reclaim.version import __version__

EXIT_LAUNCH_UNVERIFIED = 3

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    ReclaimCliError and click's own exit requests propagate unchanged;
    domain errors, RuntimeError and unexpected exceptions are converted to
    ReclaimCliError (with a traceback in verbose mode).

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (ReclaimCliError, click.exceptions.Exit):
                raise
            except ReclaimDomainError as e:
                raise ReclaimCliError(e.message, hint=e.hint) from e
            except RuntimeError as e:
                raise ReclaimCliError(
                    str(e),
                    hint="Run with --verbose for more details",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise ReclaimCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


class ConsoleWarningHandler(logging.Handler):
    """Echo warning records to stderr with click, in the stage reporter's style.

    Writes through click.echo at emit time, so output follows whatever stderr
    is current (including click's test runner).
    """

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        click.secho(
            f"{ReclaimColors.WARNING_MARK} {message}", fg=ReclaimColors.WARNING_FG, err=True
        )


def _configure_logging(verbose: bool) -> None:
    """Route reclaim's log records to the console.

    Verbose mode emits timestamped trace lines for every record. Otherwise
    only warnings are shown (e.g. a config file that could not be loaded).
    """
    package_logger = logging.getLogger("reclaim")
    for handler in list(package_logger.handlers):
        if isinstance(handler, ConsoleWarningHandler):
            package_logger.removeHandler(handler)

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.addHandler(ConsoleWarningHandler())


def _load_config():
    """Load the run configuration from the config file or defaults."""
    from reclaim.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load()


def _resolve_config(ctx: click.Context, **overrides) -> RunConfig:
    """Build the immutable run configuration: defaults < config file < flags.

    Raises:
        ReclaimCliError: If the resulting configuration is invalid.
    """
    try:
        return _load_config().with_overrides(verbose=ctx.obj.get("verbose"), **overrides)
    except ValueError as e:
        invalid_config_error(e)


def _report_outcome(ctx: click.Context, outcome: RunOutcome) -> None:
    """Print the final outcome and map it to the exit status."""
    if outcome.kind is OutcomeKind.ABORTED:
        run_aborted_error(outcome)

    if outcome.kind is OutcomeKind.LAUNCH_UNVERIFIED:
        click.secho(
            f"{ReclaimColors.WARNING_MARK} Server relaunched but not verified: {outcome.reason}",
            fg=ReclaimColors.WARNING_FG,
            err=True,
        )
        ctx.exit(EXIT_LAUNCH_UNVERIFIED)

    if ctx.obj.get("quiet", False):
        return
    if outcome.kind is OutcomeKind.ALREADY_SATISFIED:
        click.secho(
            f"{ReclaimColors.SUCCESS_MARK} Nothing to reclaim", fg=ReclaimColors.SUCCESS_FG
        )
    elif outcome.warnings:
        click.secho(
            f"{ReclaimColors.SUCCESS_MARK} Port reclaimed and server restarted "
            f"({len(outcome.warnings)} warning(s))",
            fg=ReclaimColors.WARNING_FG,
        )
    else:
        click.secho(
            f"{ReclaimColors.SUCCESS_MARK} Port reclaimed and server restarted",
            fg=ReclaimColors.SUCCESS_FG,
        )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="reclaim")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Emit timestamped diagnostic lines for each step.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """Reclaim - free a local model server's port and restart it.

    Stops the network-helper service that can hold the port, kills a hung
    server, waits for the port to free up and relaunches the server.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose)


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--port",
    "-p",
    type=click.IntRange(1, 65535),
    default=None,
    help=f"Target TCP port. [default: {DEFAULT_PORT}]",
)
@click.option(
    "--required-model",
    "-r",
    type=str,
    default=None,
    help=f"Model the server must be able to serve. [default: {DEFAULT_REQUIRED_MODEL}]",
)
@click.option(
    "--wait-timeout-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Seconds to wait for the port to free up. [default: 10]",
)
@click.option(
    "--ollama-startup-delay",
    type=click.IntRange(min=0),
    default=None,
    help="Seconds to wait for the relaunched server to respond. [default: 5]",
)
@click.option(
    "--service-name",
    type=str,
    default=None,
    help=f"Network-helper service to stop and restart. [default: {DEFAULT_SERVICE_NAME}]",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Emit timestamped diagnostic lines for each step.",
)
@click.pass_context
@handle_cli_errors("run")
def run(
    ctx: click.Context,
    port: int | None,
    required_model: str | None,
    wait_timeout_seconds: int | None,
    ollama_startup_delay: int | None,
    service_name: str | None,
    verbose: bool,
) -> None:
    """Reclaim the port and restart the model server.

    Does nothing if the server already serves the required model. Otherwise
    kills the server if it holds the port (any other process aborts the run),
    stops the network-helper service, waits for the port, relaunches the
    server and restarts the service.
    """
    from reclaim.adapters.factory import UseCaseFactory

    if verbose and not ctx.obj.get("verbose", False):
        ctx.obj["verbose"] = True
        _configure_logging(True)

    config = _resolve_config(
        ctx,
        port=port,
        required_model=required_model,
        wait_timeout_seconds=wait_timeout_seconds,
        startup_delay_seconds=ollama_startup_delay,
        service_name=service_name,
    )

    reporter = ConsoleStageReporter(quiet=ctx.obj.get("quiet", False))
    usecase = UseCaseFactory().create_reclaim_usecase(config, reporter=reporter)
    outcome = usecase.execute(config)
    _report_outcome(ctx, outcome)


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--port",
    "-p",
    type=click.IntRange(1, 65535),
    default=None,
    help=f"Target TCP port. [default: {DEFAULT_PORT}]",
)
@click.option(
    "--required-model",
    "-r",
    type=str,
    default=None,
    help=f"Model the server must be able to serve. [default: {DEFAULT_REQUIRED_MODEL}]",
)
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, port: int | None, required_model: str | None) -> None:
    """Show the server and port state without changing anything."""
    from reclaim.adapters.factory import UseCaseFactory

    config = _resolve_config(ctx, port=port, required_model=required_model)
    response = UseCaseFactory().create_status_usecase(config).execute(config)

    if response.probe is ProbeStatus.SATISFIED:
        click.secho(
            f"{ReclaimColors.SUCCESS_MARK} Server serves '{config.required_model}'",
            fg=ReclaimColors.SUCCESS_FG,
        )
    elif response.probe is ProbeStatus.RUNNING_WITHOUT_MODEL:
        click.secho(
            f"{ReclaimColors.WARNING_MARK} Server is running without '{config.required_model}'",
            fg=ReclaimColors.WARNING_FG,
        )
    else:
        click.secho(
            f"{ReclaimColors.ERROR_MARK} Server is not responding", fg=ReclaimColors.ERROR_FG
        )

    click.echo("\nDetails:")
    click.echo(f"  Port: {response.port}")
    if response.occupant is None:
        click.echo("  Listener: none")
    else:
        owner = "model server" if response.occupant_is_server else "foreign process"
        click.echo(
            f"  Listener: {response.occupant.name} (PID {response.occupant.pid}, {owner})"
        )
    click.echo(f"  Service: {config.service_name}")
    click.echo(f"\n'reclaim run' would: {response.planned_action}")


@cli.group(context_settings=CONTEXT_SETTINGS)
def config() -> None:
    """Manage the reclaim configuration file.

    Settings in the [run] table of the config file replace the built-in
    defaults; command-line flags replace both.
    """
    pass


@config.command(name="path")
def config_path() -> None:
    """Print the config file location."""
    from reclaim.shared.config_io import get_global_config_path

    click.echo(str(get_global_config_path()))


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    from reclaim.shared.config_io import get_global_config_path

    path = get_global_config_path()
    state = "exists" if path.exists() else "not created"
    click.echo(f"Config file: {path} ({state})")

    effective = _resolve_config(ctx)
    click.echo("\n[run]")
    for key, value in asdict(effective).items():
        click.echo(f"  {key} = {value!r}")


@config.command(name="init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file.")
@handle_cli_errors("config init")
def config_init(force: bool) -> None:
    """Write a config file with the default settings."""
    from reclaim.domain.config import RunConfig
    from reclaim.shared.config_io import get_global_config_path, save_config

    path = get_global_config_path()
    if path.exists() and not force:
        raise ReclaimCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )
    save_config(RunConfig.default(), path)
    click.echo(f"{ReclaimColors.SUCCESS_MARK} Wrote default config to {path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
