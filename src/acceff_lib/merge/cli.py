# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console

from acceff_lib.core.click_format import GNUHelpColorsCommand
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError, AccEffNotValidError
from acceff_lib.core.logger import get_logger
from acceff_lib.merge.merger import Merger
from acceff_lib.submit.factory import SubmitterFactory
from acceff_lib.submit.presenter import SubmitterPresenter

logger = get_logger(__name__)


@click.command(
    short_help="Submit the jobs merging the AODs.",
    help=f"""Submit the jobs merging the AODs of a production, one job per run.

{click.style("SETTINGS", fg="green")}   Path to the YAML file with the production settings.

Merging proceeds in stages. Intermediate stages 1, 2, ... must be submitted in order,
each one merging the outputs of the previous one. Stage 0 is the final merging.

When an intermediate stage merges no more than {CFG.merger.split_level} files for a run,
`{CFG.binary_name} merge` asks for confirmation before submitting it.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument("settings", type=str, metavar=click.style("SETTINGS", fg="green"))
@click.option(
    "--stage",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Merging stage to submit. 0 is the final merging.",
)
@click.option(
    "--merged-dir",
    type=str,
    default=None,
    help="Grid directory where the merged outputs are stored. Defaults to '<remote-dir>/AODs'.",
)
@click.option(
    "--grid",
    type=str,
    default=None,
    help=f"Name of the Grid backend. If not specified, the environment variable '{CFG.env_vars.grid}' or '{CFG.default_grid}' is used.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Only print the commands that would be issued.",
)
@click.option(
    "-y", "--yes", is_flag=True, help="Submit the merging without confirmation."
)
def merge(
    settings: str,
    stage: int,
    merged_dir: str | None,
    grid: str | None,
    dry_run: bool = False,
    yes: bool = False,
) -> NoReturn:
    """
    Submit the merging jobs of a production.
    """
    try:
        factory = SubmitterFactory(
            Path(settings),
            merged_dir=merged_dir,
            grid=grid,
            merging=True,
            no_compile_check=True,
        )
        submitter = factory.makeSubmitter()

        console = Console()
        presenter = SubmitterPresenter(submitter)
        if not submitter.isValid():
            console.print(presenter.createConfigPanel(console))
            raise AccEffNotValidError(
                "Production is not valid. Fix the problems listed above."
            )

        report = Merger(submitter).merge(stage, dry_run, yes)
        console.print(presenter.createReportPanel(report, console))
        if report.failures:
            raise AccEffError("Some runs could not be merged.")

        sys.exit(0)
    except AccEffError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
