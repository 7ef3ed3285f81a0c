# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click

from acceff_lib.core.click_format import GNUHelpColorsCommand
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError, AccEffMissingError
from acceff_lib.core.logger import get_logger
from acceff_lib.submit.factory import SubmitterFactory

logger = get_logger(__name__)


@click.command(
    short_help="Check that the files of a production are in place.",
    help=f"""Check that all the files of a production exist locally and in the remote directory.

{click.style("SETTINGS", fg="green")}   Path to the YAML file with the production settings.

Exits with a non-zero code if any file is missing.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument("settings", type=str, metavar=click.style("SETTINGS", fg="green"))
@click.option(
    "--local-only", is_flag=True, help="Do not check the remote directory."
)
@click.option(
    "--grid",
    type=str,
    default=None,
    help=f"Name of the Grid backend. If not specified, the environment variable '{CFG.env_vars.grid}' or '{CFG.default_grid}' is used.",
)
def check(settings: str, local_only: bool, grid: str | None) -> NoReturn:
    """
    Check the local and remote files of a production.
    """
    try:
        submitter = SubmitterFactory(
            Path(settings), grid=grid, no_compile_check=True
        ).makeSubmitter()

        missing = len(submitter.checkLocal())
        if not local_only:
            missing += len(submitter.checkRemote())

        if missing:
            raise AccEffMissingError(f"{missing} file(s) missing.")

        sys.exit(0)
    except AccEffError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
