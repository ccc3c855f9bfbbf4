import logging
import os

import click
from rich.logging import RichHandler

from .core import Bootstrapper
from .errors import BootstrapError
from .services.config_loader import ConfigLoader

DEFAULT_CONFIG_FILE = ".stackboot.yml"


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


COMMON_OPTIONS = (
    click.option(
        "--config",
        required=False,
        type=click.Path(),
        help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
    ),
    click.option("--env-file", required=False, help="Environment file that must exist before startup."),
    click.option("--compose-file", required=False, help="Docker Compose file for the stack."),
    click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging"),
    click.option("--log-file", type=click.Path(), help="Path to log file"),
    click.option(
        "--report-file",
        required=False,
        type=click.Path(),
        help="Write a JSON run report with per-step results to this path.",
    ),
)


def _common_options(func):
    for option in reversed(COMMON_OPTIONS):
        func = option(func)
    return func


def _configure_logging(verbose: bool, log_file):
    logger = logging.getLogger("stackboot")
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        log_path = os.path.abspath(log_file)
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == log_path:
                handler.setLevel(logging.DEBUG if verbose else logging.INFO)
                return

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)


def _build_bootstrapper(mode, config, env_file, compose_file, verbose, log_file, report_file):
    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.for_mode(config_loader.load(resolved_config), mode)
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    report_file = _resolve_option(report_file, config_values, "report_file")
    command_timeout = _resolve_option(None, config_values, "command_timeout")

    overrides = dict(config_values)
    overrides["env_file"] = _resolve_option(env_file, config_values, "env_file")
    overrides["compose_file"] = _resolve_option(compose_file, config_values, "compose_file")

    _configure_logging(verbose, log_file)

    try:
        return Bootstrapper(
            mode=mode,
            overrides=overrides,
            command_timeout=command_timeout,
            report_file=report_file,
        )
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.version_option(package_name="stackboot")
def main():
    """Bootstrap the application stack for development or production."""


@main.command()
@_common_options
@click.option("--dry-run", is_flag=True, default=False, help="Print the step plan without running it.")
def dev(config, env_file, compose_file, verbose, log_file, report_file, dry_run):
    """Start the development stack with a local database proxy."""
    bootstrapper = _build_bootstrapper(
        "development", config, env_file, compose_file, verbose, log_file, report_file
    )
    if dry_run:
        bootstrapper.print_plan()
        return
    raise SystemExit(bootstrapper.run())


@main.command()
@_common_options
@click.option("--dry-run", is_flag=True, default=False, help="Print the step plan without running it.")
def prod(config, env_file, compose_file, verbose, log_file, report_file, dry_run):
    """Start the production stack in detached mode and apply migrations."""
    bootstrapper = _build_bootstrapper(
        "production", config, env_file, compose_file, verbose, log_file, report_file
    )
    if dry_run:
        bootstrapper.print_plan()
        return
    raise SystemExit(bootstrapper.run())


@main.command()
@_common_options
@click.option(
    "--mode",
    type=click.Choice(Bootstrapper.VALID_MODES),
    default="development",
    show_default=True,
    help="Which mode's compose file to stop.",
)
def down(config, env_file, compose_file, verbose, log_file, report_file, mode):
    """Stop the containers started by a previous run."""
    bootstrapper = _build_bootstrapper(mode, config, env_file, compose_file, verbose, log_file, report_file)
    raise SystemExit(bootstrapper.down())


if __name__ == "__main__":
    main()
