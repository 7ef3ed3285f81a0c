# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Run lists and trigger scalers read from local files.

`StaticScalers` only knows the runs and is suitable for productions with a
fixed number of events per run. `YamlScalers` additionally reads the trigger
counts of each run from a YAML file of the form

    195682:
      CMUL7-B-NOPF-MUON: 123456
    195683:
      L2A:
        CMUL7-B-NOPF-MUON: 7890

where counts can either be given directly or grouped by trigger level.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Self

from acceff_lib.core.common import read_yaml, split_runs
from acceff_lib.core.error import AccEffError
from acceff_lib.core.logger import get_logger
from acceff_lib.properties.settings import SubmitterSettings

from .interface import ScalersInterface

logger = get_logger(__name__)


class StaticScalers(ScalersInterface):
    """Run list without trigger information."""

    def __init__(self, runs: int | Iterable[int]):
        self._runs = [runs] if isinstance(runs, int) else list(dict.fromkeys(runs))

    def getRunList(self) -> list[int]:
        return list(self._runs)

    def getTriggerCount(self, run: int, trigger: str, level: str) -> int | None:
        return None


class YamlScalers(StaticScalers):
    """Run list with trigger counts read from a YAML file."""

    def __init__(self, runs: int | Iterable[int], counts: dict[int, dict]):
        super().__init__(runs)
        self._counts = counts

    def getTriggerCount(self, run: int, trigger: str, level: str) -> int | None:
        run_counts = self._counts.get(run) or {}

        # counts grouped by trigger level take precedence
        if isinstance(leveled := run_counts.get(level), dict):
            value = leveled.get(trigger)
        else:
            value = run_counts.get(trigger)

        if value is None:
            logger.debug(f"No {level} count of trigger '{trigger}' for run {run}.")
            return None
        return int(value)

    @classmethod
    def fromFile(cls, file: Path, runs: Iterable[int] | None = None) -> Self:
        """
        Load the trigger counts from a YAML file.

        Args:
            file (Path): The YAML file with the counts.
            runs (Iterable[int] | None): Runs of the production.
                If not provided, all runs of the file are used.

        Raises:
            AccEffError: If the file cannot be read or is malformed.
        """
        data = read_yaml(file) or {}
        if not isinstance(data, dict):
            raise AccEffError(f"Scalers file '{file}' must contain a mapping.")

        try:
            counts = {int(run): (value or {}) for run, value in data.items()}
        except (TypeError, ValueError) as e:
            raise AccEffError(f"Malformed scalers file '{file}': {e}") from e

        return cls(list(runs) if runs else sorted(counts), counts)


def read_run_list(source: int | Iterable[int] | Path) -> list[int]:
    """
    Read a run list from a single run, a collection of runs or a text file.

    In text files, runs are separated by commas, whitespace or newlines,
    and everything following a `#` is ignored. Duplicates are dropped.

    Raises:
        AccEffError: If the file does not exist or contains an invalid run number.
    """
    if isinstance(source, int):
        return [source]

    if isinstance(source, (str, Path)):
        file = Path(source)
        if not file.is_file():
            raise AccEffError(f"Run list '{file}' does not exist.")
        return list(dict.fromkeys(split_runs(file.read_text())))

    return list(dict.fromkeys(int(r) for r in source))


def make_scalers(settings: SubmitterSettings) -> ScalersInterface:
    """
    Build the scalers of a production from its settings.
    """
    runs = settings.getRuns()
    if settings.scalers_file:
        return YamlScalers.fromFile(settings.scalers_file, runs)
    return StaticScalers(runs)
