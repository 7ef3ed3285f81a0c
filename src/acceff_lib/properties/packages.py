# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import dataclass
from typing import Self

from acceff_lib.core.config import CFG


@dataclass(frozen=True)
class Packages:
    """
    Software packages requested by the Grid jobs.

    Must be a valid combination, see http://alimonitor.cern.ch/packages/.
    """

    aliroot: str = CFG.submitter.package_aliroot
    geant3: str = CFG.submitter.package_geant3
    root: str = CFG.submitter.package_root
    api: str = CFG.submitter.package_api

    def toList(self) -> list[str]:
        """Get the defined packages in the order used by the JDL files."""
        return [p for p in (self.aliroot, self.geant3, self.root, self.api) if p]

    @classmethod
    def fromDict(cls, data: dict[str, str] | None) -> Self:
        """Build packages from a dictionary, using defaults for missing entries."""
        data = data or {}
        return cls(**{k: str(v) for k, v in data.items() if k in cls.__dataclass_fields__})
