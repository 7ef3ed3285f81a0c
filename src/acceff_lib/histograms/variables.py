# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Iterator
from dataclasses import dataclass

import hist

from acceff_lib.core.error import AccEffError


@dataclass(frozen=True)
class EventClassVariable:
    """
    A variable defining event classes, binned in a fixed range.

    `id` is the position of the variable value in the containers of
    event variables passed to the histograms.
    """

    id: int
    name: str
    label: str
    nbins: int
    low: float
    high: float

    # explicit bin edges (uniform bins in [low, high) if not provided)
    edges: tuple[float, ...] | None = None

    def __post_init__(self):
        if self.edges is None and (self.nbins <= 0 or self.low >= self.high):
            raise AccEffError(
                f"Invalid binning of variable '{self.name}': {self.nbins} bins in [{self.low}, {self.high})."
            )
        if self.edges is not None and len(self.edges) != self.nbins + 1:
            raise AccEffError(
                f"Variable '{self.name}' has {self.nbins} bins but {len(self.edges)} edges."
            )

    def makeAxis(self) -> hist.axis.Regular | hist.axis.Variable:
        """Create the histogram axis of the variable."""
        if self.edges is not None:
            return hist.axis.Variable(self.edges, name=self.name, label=self.label)
        return hist.axis.Regular(
            self.nbins, self.low, self.high, name=self.name, label=self.label
        )


class EventClassVariablesSet:
    """Ordered set of the variables defining the event classes."""

    def __init__(self, variables: list[EventClassVariable] | None = None):
        self._variables: list[EventClassVariable] = []
        for var in variables or []:
            self.add(var)

    def add(self, variable: EventClassVariable) -> None:
        """
        Add a variable to the set.

        Raises:
            AccEffError: If a variable with the same name is already present.
        """
        if any(v.name == variable.name for v in self._variables):
            raise AccEffError(f"Variable '{variable.name}' is already in the set.")
        self._variables.append(variable)

    def __iter__(self) -> Iterator[EventClassVariable]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __getitem__(self, index: int) -> EventClassVariable:
        return self._variables[index]
