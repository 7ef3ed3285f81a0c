# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Template variables and their substitution.

A template variable is a token made of the variable prefix (`VAR_` by default)
followed by alphanumeric or underscore characters. Lines starting with the
comment prefix are never inspected. Substitution is all-or-nothing: a file
is only rewritten once every variable it contains has a value.
"""

import re
from collections.abc import Iterator
from pathlib import Path

from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError, AccEffUnresolvedVariableError
from acceff_lib.core.logger import get_logger

logger = get_logger(__name__)

# variables installed in every production, mostly defaults
# for J/psi (from the p+Pb muon_calo pass) and single muon generators
DEFAULT_VARIABLES: dict[str, str] = {
    "VAR_OCDB_PATH": '"raw://"',
    "VAR_GENPARAM_GENLIB_TYPE": "AliGenMUONlib::kJpsi",
    "VAR_GENPARAM_GENLIB_PARNAME": '"pPb 5.03"',
    "VAR_GENCORRHF_QUARK": "5",
    "VAR_GENCORRHF_ENERGY": "5",
    "VAR_GENPARAMCUSTOM_PDGPARTICLECODE": "443",
    "VAR_GENPARAMCUSTOM_Y_P0": "4.08E5",
    "VAR_GENPARAMCUSTOM_Y_P1": "7.1E4",
    "VAR_GENPARAMCUSTOM_PT_P0": "1.13E9",
    "VAR_GENPARAMCUSTOM_PT_P1": "18.05",
    "VAR_GENPARAMCUSTOM_PT_P2": "2.05",
    "VAR_GENPARAMCUSTOM_PT_P3": "3.34",
    "VAR_GENPARAMCUSTOMSINGLE_PTMIN": "0.35",
    "VAR_GENPARAMCUSTOMSINGLE_PT_P0": "4.05962",
    "VAR_GENPARAMCUSTOMSINGLE_PT_P1": "1.0",
    "VAR_GENPARAMCUSTOMSINGLE_PT_P2": "2.46187",
    "VAR_GENPARAMCUSTOMSINGLE_PT_P3": "2.08644",
    "VAR_GENPARAMCUSTOMSINGLE_Y_P0": "0.729545",
    "VAR_GENPARAMCUSTOMSINGLE_Y_P1": "0.53837",
    "VAR_GENPARAMCUSTOMSINGLE_Y_P2": "0.141776",
    "VAR_GENPARAMCUSTOMSINGLE_Y_P3": "0.0130173",
}


def _token_pattern() -> re.Pattern:
    return re.compile(re.escape(CFG.templates.variable_prefix) + r"[A-Za-z0-9_]*")


def _is_comment(line: str) -> bool:
    return line.startswith(CFG.templates.comment_prefix)


class VariableStore:
    """
    Mapping of template variable names to their replacement strings.

    Names are case-insensitive (stored upper-cased) and must start
    with the variable prefix. Setting an existing variable overwrites it.
    """

    def __init__(self, variables: dict[str, str] | None = None):
        self._vars: dict[str, str] = {}
        for name, value in (variables or {}).items():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        """
        Set the value of a variable.

        Raises:
            AccEffError: If the name does not start with the variable prefix.
        """
        key = name.upper()
        if not key.startswith(CFG.templates.variable_prefix):
            raise AccEffError(
                f"Variable name '{name}' should start with '{CFG.templates.variable_prefix}'."
            )
        self._vars[key] = str(value)

    def get(self, name: str) -> str | None:
        """Get the value of a variable or None if it is not defined."""
        return self._vars.get(name.upper())

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._vars.items())

    def copy(self) -> "VariableStore":
        return VariableStore(dict(self._vars))

    def __contains__(self, name: str) -> bool:
        return name.upper() in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def substitute(self, text: str, source: str = "<text>") -> str:
        """
        Replace all variables in `text` by their values.

        Lines starting with the comment prefix are kept as they are.
        Values containing variables are expanded in turn.

        Args:
            text (str): Text to transform.
            source (str): Name of the text origin used in error messages.

        Returns:
            str: The transformed text.

        Raises:
            AccEffUnresolvedVariableError: If any variable has no value.
        """
        pattern = _token_pattern()
        missing: list[str] = []

        def replace(match: re.Match) -> str:
            token = match.group(0)
            if (value := self._vars.get(token)) is None:
                if token not in missing:
                    missing.append(token)
                return token
            return value

        def expand(line: str) -> str:
            # values may contain variables themselves, bounded to stop cycles
            for _ in range(len(self._vars) + 1):
                expanded = pattern.sub(replace, line)
                if expanded == line:
                    break
                line = expanded
            return line

        lines = [
            line if _is_comment(line) else expand(line)
            for line in text.splitlines(keepends=True)
        ]

        if missing:
            raise AccEffUnresolvedVariableError(source, missing)

        return "".join(lines)


def find_variables(file: Path) -> list[str]:
    """
    Get the distinct variables used in a file, in order of first appearance.
    """
    pattern = _token_pattern()
    variables: list[str] = []
    for line in file.read_text().splitlines():
        if _is_comment(line):
            continue
        for token in pattern.findall(line):
            if token not in variables:
                variables.append(token)

    return variables


def has_variables(file: Path) -> bool:
    """Whether the file contains variables that have to be substituted."""
    prefix = CFG.templates.variable_prefix
    return any(
        prefix in line and not _is_comment(line)
        for line in file.read_text().splitlines()
    )


def replace_variables(file: Path, store: VariableStore) -> bool:
    """
    Substitute the variables of a file in place.

    The file is only rewritten if it contains at least one variable
    and all of them could be resolved.

    Returns:
        bool: True if the file was rewritten, False if it contains no variable.

    Raises:
        AccEffUnresolvedVariableError: If a variable has no value. The file is left untouched.
    """
    if not has_variables(file):
        return False

    text = store.substitute(file.read_text(), str(file))
    file.write_text(text)
    logger.debug(f"Substituted variables in '{file}'.")
    return True
