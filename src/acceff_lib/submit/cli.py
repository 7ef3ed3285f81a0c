# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import sys
from pathlib import Path
from typing import NoReturn

import click
from click_option_group import optgroup
from rich.console import Console

from acceff_lib.core.click_format import GNUHelpColorsCommand
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError, AccEffNotValidError
from acceff_lib.core.logger import get_logger
from acceff_lib.properties.mode import Mode
from acceff_lib.submit.factory import SubmitterFactory
from acceff_lib.submit.presenter import SubmitterPresenter

logger = get_logger(__name__)


@click.command(
    short_help="Prepare, upload and submit a production.",
    help=f"""
Prepare, upload and submit a simulation production described by a settings file.

{click.style("MODE", fg="green")}       What to do. One of:
           local   instantiate the template files in the local directory,
           ocdb    local, then make the OCDB snapshots of the runs,
           upload  copy the local files to the remote directory,
           submit  submit the jobs,
           test    ocdb + upload, then show what would be submitted,
           full    ocdb + upload + submit.

{click.style("SETTINGS", fg="green")}   Path to the YAML file with the production settings.

All the options override the corresponding entries of the settings file.
""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "mode",
    type=click.Choice([str(m) for m in Mode], case_sensitive=False),
    metavar=click.style("MODE", fg="green"),
)
@click.argument("settings", type=str, metavar=click.style("SETTINGS", fg="green"))
@optgroup.group(f"{click.style('Directories', fg='yellow')}")
@optgroup.option(
    "--remote-dir",
    type=str,
    default=None,
    help="Grid directory where the files are uploaded and from which the jobs are submitted.",
)
@optgroup.option(
    "--create-remote-dir",
    is_flag=True,
    default=False,
    help="Create the remote directory if it does not exist.",
)
@optgroup.option(
    "--local-dir",
    type=str,
    default=None,
    help="Local directory where the template files are instantiated.",
)
@optgroup.option(
    "--template-dir",
    type=str,
    default=None,
    help=f"Directory containing the template files. Defaults to '${CFG.env_vars.alice_root}/{CFG.submitter.template_subdir}'.",
)
@optgroup.option(
    "--snapshot-dir",
    type=str,
    default=None,
    help="Directory containing the OCDB snapshots. Defaults to the local directory.",
)
@optgroup.option(
    "--overwrite",
    is_flag=True,
    default=False,
    help="Overwrite existing local files.",
)
@optgroup.option(
    "--grid",
    type=str,
    default=None,
    help=f"Name of the Grid backend. If not specified, the environment variable '{CFG.env_vars.grid}' or '{CFG.default_grid}' is used.",
)
@optgroup.group(f"{click.style('Production', fg='yellow')}")
@optgroup.option(
    "--generator",
    type=str,
    default=None,
    help="Name of the generator macro in the template directory.",
)
@optgroup.option(
    "--ocdb-path",
    type=str,
    default=None,
    help=f"OCDB used by the simulation. Defaults to '{CFG.submitter.ocdb_path}'.",
)
@optgroup.option(
    "--no-snapshots",
    is_flag=True,
    default=False,
    help="Do not make nor use OCDB snapshots.",
)
@optgroup.option(
    "--merging",
    is_flag=True,
    default=False,
    help="Also prepare the files needed to merge the AODs.",
)
@optgroup.option(
    "--compact-mode",
    type=click.IntRange(0, 1),
    default=None,
    help="0 keeps all the outputs of the jobs, 1 keeps only the muon AODs.",
)
@optgroup.option(
    "--no-compile-check",
    is_flag=True,
    default=False,
    help="Do not check that the generator macro compiles.",
)
@optgroup.option(
    "--var",
    type=str,
    multiple=True,
    help="Set a template variable as NAME=VALUE. Can be repeated.",
)
@optgroup.group(f"{click.style('Events', fg='yellow')}")
@optgroup.option(
    "--ratio",
    type=float,
    default=None,
    help="Number of generated events per reference trigger. If not positive, a fixed number of events per run is generated.",
)
@optgroup.option(
    "--reference-trigger",
    type=str,
    default=None,
    help="Trigger class used to compute the number of events of each run.",
)
@optgroup.option(
    "--fixed-events",
    type=int,
    default=None,
    help="Number of events generated per run when the ratio is not positive.",
)
@optgroup.option(
    "--max-events-per-chunk",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of events generated by a single job.",
)
@optgroup.group(f"{click.style('Runs', fg='yellow')}")
@optgroup.option(
    "--runs",
    type=str,
    default=None,
    help="Comma- or space-separated list of runs. Replaces the runs of the settings file.",
)
@optgroup.option(
    "--run-list",
    type=str,
    default=None,
    help="Text file with the list of runs. Replaces the runs of the settings file.",
)
@optgroup.option(
    "--scalers-file",
    type=str,
    default=None,
    help="YAML file with the trigger counts of the runs.",
)
def run(mode: str, settings: str, **kwargs) -> NoReturn:
    """
    Prepare, upload and/or submit a production.
    """
    try:
        factory = SubmitterFactory(Path(settings), **kwargs)
        submitter = factory.makeSubmitter()

        console = Console()
        presenter = SubmitterPresenter(submitter)

        if not submitter.isValid():
            console.print(presenter.createConfigPanel(console))
            raise AccEffNotValidError(
                "Production is not valid. Fix the problems listed above."
            )

        report = submitter.run(Mode.fromStr(mode))
        if report is not None:
            console.print(presenter.createReportPanel(report, console))
            if not report.success:
                raise AccEffError("Some runs could not be submitted.")

        sys.exit(0)
    except AccEffError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
