"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from host_provisioner.configuration import DEFAULT_CONFIG_FILENAME
from host_provisioner.run_execution import RunOutcome, RunRequest, execute_provisioning_run

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class ProvisioningFailed(click.ClickException):
    """Carries a failed run's exit status out of the click command."""

    def __init__(self, outcome: RunOutcome) -> None:
        super().__init__(outcome.failure.render() if outcome.failure else "Provisioning failed.")
        self.exit_code = outcome.exit_status

    def show(self, file=None) -> None:
        click.echo(self.message, err=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="host-provisioner")
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    envvar="HOST_PROVISIONER_CONFIG",
    type=click.Path(path_type=str),
    help="Path to the KEY=value provisioning configuration",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every host command.")
def cli(config_path: str, verbose: bool) -> None:
    """Provision this host and deploy the backend and frontend applications."""
    _configure_logging(verbose)
    outcome = execute_provisioning_run(RunRequest(config_path=config_path))
    if not outcome.succeeded:
        raise ProvisioningFailed(outcome)

    for warning in outcome.warnings:
        click.echo(f"warning: {warning}", err=True)
    click.echo("Setup complete!")
    if outcome.target is not None:
        click.echo(f"Frontend -> port {outcome.target.frontend.port}")
        click.echo(f"Backend  -> port {outcome.target.backend.port}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
