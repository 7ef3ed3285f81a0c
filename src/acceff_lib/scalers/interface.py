# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from abc import ABC, abstractmethod


class ScalersInterface(ABC):
    """
    Source of the runs of a production and of their trigger scaler counts.
    """

    @abstractmethod
    def getRunList(self) -> list[int]:
        """Get the ordered list of runs."""

    @abstractmethod
    def getTriggerCount(self, run: int, trigger: str, level: str) -> int | None:
        """
        Get the number of triggers of class `trigger` counted at `level` in `run`.

        Returns:
            int | None: The count, or None if it is not known.
        """

    def __len__(self) -> int:
        return len(self.getRunList())

    def __str__(self) -> str:
        return " ".join(str(r) for r in self.getRunList())
