# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click

from acceff_lib.core.click_format import GNUHelpColorsCommand
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError
from acceff_lib.core.logger import get_logger
from acceff_lib.submit.factory import SubmitterFactory

logger = get_logger(__name__)


@click.command(
    short_help="Remove the files of a production.",
    help=f"""Remove the local files of a production and optionally their remote copies.

{click.style("SETTINGS", fg="green")}   Path to the YAML file with the production settings.

OCDB snapshots are kept unless `--snapshots` is specified, since making them is slow.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument("settings", type=str, metavar=click.style("SETTINGS", fg="green"))
@click.option(
    "--snapshots", is_flag=True, help="Remove also the local OCDB snapshots."
)
@click.option(
    "--remote",
    is_flag=True,
    help="Remove also the copies of the local files in the remote directory.",
)
@click.option(
    "--grid",
    type=str,
    default=None,
    help=f"Name of the Grid backend. If not specified, the environment variable '{CFG.env_vars.grid}' or '{CFG.default_grid}' is used.",
)
def clean(
    settings: str, snapshots: bool, remote: bool, grid: str | None
) -> NoReturn:
    """
    Remove the files of a production.
    """
    try:
        submitter = SubmitterFactory(
            Path(settings), grid=grid, no_compile_check=True
        ).makeSubmitter()

        submitter.cleanLocal(clean_snapshots=snapshots)
        if remote:
            submitter.cleanRemote()

        sys.exit(0)
    except AccEffError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
