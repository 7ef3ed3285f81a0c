# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import replace
from pathlib import Path
from typing import Any

from acceff_lib.core.common import split_runs
from acceff_lib.core.error import AccEffError
from acceff_lib.grid.interface import GridInterface, GridMeta
from acceff_lib.properties.settings import SubmitterSettings
from acceff_lib.scalers import make_scalers

from .submitter import Submitter


class SubmitterFactory:
    """
    Factory class to construct a Submitter instance based on a settings file
    and on the options specified on the command line.
    """

    def __init__(self, settings_file: Path, **kwargs):
        """
        Initialize the factory with the settings file and the command-line options.

        Args:
            settings_file (Path): Path to the YAML file with the production settings.
            **kwargs: Keyword arguments from the command line. Options that were
                not specified (None or False) do not override the settings file.
        """
        self._settings_file = settings_file
        self._kwargs = kwargs

    def makeSettings(self) -> SubmitterSettings:
        """
        Load the settings file and apply the command-line overrides.

        Raises:
            AccEffError: If the settings file or an option is invalid.
        """
        if not self._settings_file.is_file():
            raise AccEffError(
                f"Settings file '{self._settings_file}' does not exist or is not a file."
            )

        settings = SubmitterSettings.fromFile(self._settings_file)
        settings = settings.updated(**self._getOverrides(settings))
        return self._applyRuns(settings)

    def makeSubmitter(self) -> Submitter:
        """
        Construct and return a Submitter instance.

        Returns:
            Submitter: A validated submitter. Check `Submitter.isValid` before using it.
        """
        settings = self.makeSettings()
        return Submitter(settings, self._getGrid(), make_scalers(settings))

    def _getGrid(self) -> type[GridInterface]:
        """
        Determine which Grid backend to use.

        Priority:
            1. Command-line specification
            2. Environment variable
            3. Default from the configuration
        """
        return GridMeta.obtain(self._kwargs.get("grid"))

    def _getOverrides(self, settings: SubmitterSettings) -> dict[str, Any]:
        """
        Translate the command-line options into settings overrides.
        """
        kw = self._kwargs
        overrides: dict[str, Any] = {
            "remote_dir": kw.get("remote_dir"),
            "merged_dir": kw.get("merged_dir"),
            "generator": kw.get("generator"),
            "ocdb_path": kw.get("ocdb_path"),
            "reference_trigger": kw.get("reference_trigger"),
            "ratio": kw.get("ratio"),
            "fixed_nof_events": kw.get("fixed_events"),
            "max_events_per_chunk": kw.get("max_events_per_chunk"),
            "compact_mode": kw.get("compact_mode"),
        }

        for key in ("local_dir", "template_dir", "snapshot_dir", "scalers_file"):
            if value := kw.get(key):
                overrides[key] = Path(value).resolve()

        # flags only override the settings file when they are set
        if kw.get("create_remote_dir"):
            overrides["create_remote_dir"] = True
        if kw.get("overwrite"):
            overrides["overwrite_files"] = True
        if kw.get("merging"):
            overrides["use_aod_merging"] = True
        if kw.get("no_snapshots"):
            overrides["use_ocdb_snapshots"] = False
        if kw.get("no_compile_check"):
            overrides["check_compilation"] = False

        if variables := kw.get("var"):
            overrides["variables"] = {
                **settings.variables,
                **SubmitterFactory._parseVariables(variables),
            }

        return overrides

    def _applyRuns(self, settings: SubmitterSettings) -> SubmitterSettings:
        """
        Replace the runs of the settings file by the runs from the command line.
        """
        runs = self._kwargs.get("runs")
        run_list = self._kwargs.get("run_list")
        if not runs and not run_list:
            return settings

        return replace(
            settings,
            runs=split_runs(runs),
            run_list_file=Path(run_list).resolve() if run_list else None,
        )

    @staticmethod
    def _parseVariables(variables: tuple[str, ...]) -> dict[str, str]:
        """
        Parse variables specified as NAME=VALUE.

        Raises:
            AccEffError: If a variable is not in the NAME=VALUE format.
        """
        parsed = {}
        for var in variables:
            name, sep, value = var.partition("=")
            if not sep or not name.strip():
                raise AccEffError(
                    f"Could not parse variable '{var}'. Expected format is NAME=VALUE."
                )
            parsed[name.strip()] = value
        return parsed
