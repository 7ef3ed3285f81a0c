# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console

from acceff_lib.core.click_format import GNUHelpColorsCommand
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError
from acceff_lib.core.logger import get_logger
from acceff_lib.submit.factory import SubmitterFactory
from acceff_lib.submit.presenter import SubmitterPresenter

logger = get_logger(__name__)


@click.command(
    short_help="Display the configuration of a production.",
    help=f"""Display the directories, event policy, runs, template variables
and files to upload of a production.

{click.style("SETTINGS", fg="green")}   Path to the YAML file with the production settings.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument("settings", type=str, metavar=click.style("SETTINGS", fg="green"))
@click.option(
    "--grid",
    type=str,
    default=None,
    help=f"Name of the Grid backend. If not specified, the environment variable '{CFG.env_vars.grid}' or '{CFG.default_grid}' is used.",
)
def show(settings: str, grid: str | None) -> NoReturn:
    """
    Display the configuration of a production.
    """
    try:
        submitter = SubmitterFactory(
            Path(settings), grid=grid, no_compile_check=True
        ).makeSubmitter()

        console = Console()
        console.print(SubmitterPresenter(submitter).createConfigPanel(console))
        sys.exit(0)
    except AccEffError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
