# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout acceff.

Every recoverable acceff error derives from `AccEffError` and carries
an exit code used by acceff commands to report failures consistently.
"""

from acceff_lib.core.config import CFG


class AccEffError(Exception):
    """Common exception type for all recoverable acceff errors."""

    exit_code = CFG.exit_codes.default


class AccEffConnectionError(AccEffError):
    """Raised when the Grid service cannot be reached."""

    pass


class AccEffMissingError(AccEffError):
    """Raised when a required local or remote file or directory does not exist."""

    pass


class AccEffUnresolvedVariableError(AccEffError):
    """Raised when a template contains variables that have no substitution."""

    def __init__(self, source: str, missing: list[str]):
        self.source = source
        self.missing = missing
        super().__init__(
            f"Unresolved variable(s) in '{source}': {', '.join(missing)}."
        )


class AccEffNotValidError(AccEffError):
    """Raised when an operation is requested from an invalid submitter."""

    pass


class AccEffSubmissionError(AccEffError):
    """Raised when a job for a single run could not be submitted."""

    def __init__(self, run: int, message: str):
        self.run = run
        super().__init__(f"Run {run}: {message}")
