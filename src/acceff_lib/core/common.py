# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General utility functions for the acceff library.

This module provides helpers for YAML I/O, run-list parsing, path handling
of Grid paths, user prompts, and panel sizing.
"""

import posixpath
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import readchar
import yaml
from rich.console import Console
from rich.live import Live
from rich.text import Text

from .error import AccEffError
from .logger import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def load_yaml_dumper() -> type[yaml.Dumper]:
    """Return the fastest available YAML dumper (CDumper if possible)."""
    try:
        from yaml import CDumper as Dumper  # type: ignore[attr-defined]

        logger.debug("Loaded YAML CDumper.")
    except ImportError:
        from yaml import Dumper

        logger.debug("Loaded default YAML dumper.")
    return Dumper


@lru_cache(maxsize=1)
def load_yaml_loader() -> type[yaml.SafeLoader]:
    """Return the fastest available safe YAML loader (CSafeLoader if possible)."""
    try:
        from yaml import CSafeLoader as SafeLoader  # type: ignore[attr-defined]

        logger.debug("Loaded YAML CLoader.")
    except ImportError:
        from yaml import SafeLoader

        logger.debug("Loaded default YAML loader.")

    return SafeLoader


def read_yaml(file: Path) -> Any:
    """
    Read and parse a YAML file.

    Raises:
        AccEffError: If the file does not exist or cannot be parsed.
    """
    if not file.is_file():
        raise AccEffError(f"File '{file}' does not exist.")

    try:
        with file.open() as f:
            return yaml.load(f, Loader=load_yaml_loader())
    except yaml.YAMLError as e:
        raise AccEffError(f"Could not parse YAML file '{file}': {e}") from e


def split_runs(string: str | None) -> list[int]:
    """
    Split a string containing run numbers into a list of integers.

    Run numbers can be separated by commas or any whitespace characters.
    Everything following a `#` on a line is a comment.

    Raises:
        AccEffError: If an entry is not an integer.
    """
    if not string:
        return []

    runs = []
    for line in string.splitlines():
        line = line.split("#", 1)[0]
        for token in re.split(r"[,\s]+", line.strip()):
            if not token:
                continue
            try:
                runs.append(int(token))
            except ValueError as e:
                raise AccEffError(f"Could not parse run number '{token}'.") from e

    return runs


def grid_basename(path: str) -> str:
    """Return the last component of a Grid path, ignoring trailing slashes."""
    return posixpath.basename(path.strip().rstrip("/"))


def grid_dirname(path: str) -> str:
    """Return the parent of a Grid path, ignoring trailing slashes."""
    return posixpath.dirname(path.strip().rstrip("/"))


def yes_or_no_prompt(prompt: str) -> bool:
    """
    Display an interactive yes/no prompt to the user and return the selection.

    The prompt highlights the pressed key ('Y' in green for yes, 'n' in red for no)
    and defaults to 'Yes' if the user presses any key other than 'n'.

    Args:
        prompt (str): The text to display as the question.

    Returns:
        bool: False if the user presses 'n', True otherwise.
    """
    prompt = f"   {prompt} "
    text = (
        Text("PROMPT", style="magenta")
        + Text(prompt, style="default")
        + Text("[Y/n]", style="bold default")
    )

    with Live(text, refresh_per_second=1) as live:
        key = readchar.readkey().lower()

        if key == "n":
            choice = (
                Text("[Y/", style="bold default")
                + Text("n", style="bold red")
                + Text("]", style="bold default")
            )
        else:
            choice = (
                Text("[", style="bold default")
                + Text("Y", style="bold green")
                + Text("/n]", style="bold default")
            )

        live.update(
            Text("PROMPT", style="magenta") + Text(prompt, style="default") + choice
        )

    return key != "n"


def get_panel_width(
    console: Console, factor: int, min_width: int | None, max_width: int | None
) -> int:
    """
    Calculate the width of a panel relative to the console width, constrained by
    optional minimum and maximum width values.
    """
    panel_width = console.size.width // factor
    if min_width is not None:
        panel_width = max(panel_width, min_width)
    if max_width is not None:
        panel_width = min(panel_width, max_width)

    return panel_width
