# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Enumeration of the operating modes of the submitter.
"""

from enum import Enum
from typing import Self

from acceff_lib.core.error import AccEffError


class Mode(Enum):
    """
    Operating mode of `Submitter.run`.

    LOCAL   copy the template files from the template directory to the local one
    OCDB    LOCAL, then make the OCDB snapshots
    UPLOAD  copy the local files to the Grid (requires LOCAL)
    SUBMIT  submit the jobs (requires LOCAL and UPLOAD)
    TEST    LOCAL, OCDB, UPLOAD, then a dry submission
    FULL    LOCAL, OCDB, UPLOAD, then the actual submission
    """

    LOCAL = 1
    OCDB = 2
    UPLOAD = 3
    SUBMIT = 4
    TEST = 5
    FULL = 6

    def __str__(self):
        return self.name.lower()

    @classmethod
    def fromStr(cls, s: str) -> Self:
        """
        Convert a string to the corresponding Mode enum variant.

        Args:
            s (str): String representation of the mode (case-insensitive).

        Returns:
            Mode variant.

        Raises:
            AccEffError if the string corresponds to no Mode.
        """
        try:
            return cls[s.strip().upper()]
        except KeyError:
            raise AccEffError(
                f"Could not recognize a mode '{s}'. Available modes: {', '.join(str(m) for m in cls)}."
            )
