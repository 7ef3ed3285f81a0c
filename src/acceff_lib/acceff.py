# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys

import click
from click_help_colors import HelpColorsGroup

from acceff_lib.check.cli import check
from acceff_lib.clean.cli import clean
from acceff_lib.merge.cli import merge
from acceff_lib.show.cli import show
from acceff_lib.status.cli import status
from acceff_lib.submit.cli import run

__version__ = "0.1.0"

# support both --help and -h
_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    cls=HelpColorsGroup,
    help_options_color="bright_blue",
    invoke_without_command=True,
    context_settings=_CONTEXT_SETTINGS,
)
@click.option(
    "--version",
    is_flag=True,
    help="Print the current version of acceff and exit.",
)
@click.pass_context
def cli(ctx: click.Context, version: bool):
    """
    Run any acceff command.

    acceff prepares, uploads, submits and merges Monte Carlo productions
    used to compute the acceptance x efficiency of muon analyses on the ALICE Grid.
    """
    if version:
        print(__version__)
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(0)


cli.add_command(run)
cli.add_command(merge)
cli.add_command(show)
cli.add_command(check)
cli.add_command(clean)
cli.add_command(status)
