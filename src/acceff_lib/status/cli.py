# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from acceff_lib.core.click_format import GNUHelpColorsCommand
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError, AccEffMissingError
from acceff_lib.core.logger import get_logger
from acceff_lib.grid.interface import GridMeta

logger = get_logger(__name__)


@click.command(
    short_help="Display the state of a Grid job.",
    help=f"""Display what the Grid knows about a submitted job.

{click.style("JOB_ID", fg="green")}   The identifier of the job, as printed by `{CFG.binary_name} run`.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument("job", type=str, metavar=click.style("JOB_ID", fg="green"))
@click.option(
    "--grid",
    type=str,
    default=None,
    help=f"Name of the Grid backend. If not specified, the environment variable '{CFG.env_vars.grid}' or '{CFG.default_grid}' is used.",
)
def status(job: str, grid: str | None) -> NoReturn:
    """
    Display the state of a Grid job.
    """
    try:
        Grid = GridMeta.obtain(grid)
        Grid.connect()

        result = Grid.queryJob(job)
        if not result:
            raise AccEffMissingError(f"Job '{job}' does not exist.")

        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(justify="right", style=CFG.presenter.key_style)
        table.add_column(justify="left", style=CFG.presenter.value_style)
        for entry in result:
            for key, value in entry.items():
                table.add_row(f"{key}:", value)

        Console().print(table)
        sys.exit(0)
    except AccEffError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
