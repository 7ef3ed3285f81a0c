# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for acceff.

This module defines dataclasses representing the configurable aspects of acceff,
including environment variables, exit codes, templating conventions, default
production parameters, external commands, and presentation settings.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self


@dataclass
class EnvironmentVariables:
    """Environment variable names used by acceff."""

    # Enables acceff debug mode.
    debug_mode: str = "ACCEFF_DEBUG"
    # Path to the acceff configuration file.
    config_file: str = "ACCEFF_CONFIG"
    # Name of the Grid backend to use.
    grid: str = "ACCEFF_GRID"
    # Root of the AliRoot installation, used to locate the default templates.
    alice_root: str = "ALICE_ROOT"


@dataclass
class TemplateSettings:
    """Conventions used when instantiating template files."""

    # Prefix of every substitutable variable.
    variable_prefix: str = "VAR_"
    # Lines starting with this prefix are never substituted.
    comment_prefix: str = "//"
    # Marker contained in the names of OCDB snapshot files.
    snapshot_marker: str = "OCDB_"
    # Types of OCDB snapshots produced for each run.
    snapshot_types: list[str] = field(default_factory=lambda: ["sim", "rec"])


@dataclass
class SubmitterDefaults:
    """Default values of production settings."""

    # Template directory relative to $ALICE_ROOT.
    template_subdir: str = "PWG/muondep/AccEffTemplates"
    # Default OCDB path.
    ocdb_path: str = "raw://"
    # Default AliRoot package.
    package_aliroot: str = "VO_ALICE@AliRoot::v5-03-Rev-18"
    # Default GEANT3 package.
    package_geant3: str = "VO_ALICE@GEANT3::v1-14-8"
    # Default ROOT package.
    package_root: str = "VO_ALICE@ROOT::v5-34-05-1"
    # Default API package (empty means none).
    package_api: str = ""
    # Default generator macro (without the .C extension).
    generator: str = "GenParamCustom"
    # Number of generated events per reference trigger.
    ratio: float = 1.0
    # Number of events per run used when ratio is not positive.
    fixed_nof_events: int = 10000
    # Maximum number of events in a single chunk (job).
    max_events_per_chunk: int = 5000
    # Maximum number of input files for a single merging job.
    split_max_input_file_number: int = 20
    # 0 keeps all outputs, 1 keeps only muon AODs.
    compact_mode: int = 1
    # Whether OCDB snapshots are produced and shipped with the jobs.
    use_ocdb_snapshots: bool = True
    # Whether merging JDLs are generated.
    use_aod_merging: bool = False
    # Name of the run JDL.
    run_jdl_name: str = "run.jdl"
    # Name of the intermediate merging JDL.
    merge_jdl_name: str = "AOD_merge.jdl"
    # Name of the final merging JDL.
    final_merge_jdl_name: str = "AOD_merge_final.jdl"
    # Trigger level of the scalers used to compute the number of events.
    trigger_level: str = "L2A"
    # Whether the generator macro is compiled before being accepted.
    check_compilation: bool = True


@dataclass
class CommandSettings:
    """External commands called by acceff."""

    # Grid command-line client.
    alien: str = "alien.py"
    # ROOT executable used for the compilation check.
    root: str = "root"
    # AliRoot executable used to produce OCDB snapshots.
    aliroot: str = "aliroot"
    # Include paths (relative to $ALICE_ROOT) for the compilation check.
    include_dirs: list[str] = field(default_factory=lambda: ["include", "EVGEN"])


@dataclass
class MergerSettings:
    """Settings for Merger operations."""

    # Below this number of files, intermediate merging asks for confirmation.
    split_level: int = 10
    # Name of the archive produced by production and merging jobs.
    archive_name: str = "root_archive.zip"
    # Name of the collection used by the final merging.
    final_collection: str = "wn.xml"


@dataclass
class PresenterSettings:
    """Settings for the configuration and submission panels."""

    # Maximal width of the panels.
    max_width: int | None = None
    # Minimal width of the panels.
    min_width: int | None = 80
    # Style of the border lines.
    border_style: str = "white"
    # Style of the title.
    title_style: str = "white bold"
    # Style used for keys.
    key_style: str = "default bold"
    # Style used for values.
    value_style: str = "white"
    # Style used for notes.
    notes_style: str = "grey50"
    # Style used for the invalid-object banner.
    invalid_style: str = "bright_red bold"
    # Style used for failed runs.
    failed_style: str = "bright_red"
    # Style used for submitted runs.
    submitted_style: str = "bright_green"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used by acceff.
    standard: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Default error code for failures of acceff commands.
    default: int = 91
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class Config:
    """Main configuration for acceff."""

    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    templates: TemplateSettings = field(default_factory=TemplateSettings)
    submitter: SubmitterDefaults = field(default_factory=SubmitterDefaults)
    commands: CommandSettings = field(default_factory=CommandSettings)
    merger: MergerSettings = field(default_factory=MergerSettings)
    presenter: PresenterSettings = field(default_factory=PresenterSettings)
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)

    # Name of the Grid backend used when none is requested.
    default_grid: str = "AliEn"

    # Name of the acceff binary.
    binary_name: str = "acceff"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path: Explicit path to config file. If None, searches standard locations.

        Returns:
            Config instance with loaded or default values.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read acceff config '{config_path}': {e}.")

        # no config found - use defaults
        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            Path(env_path) if (env_path := os.getenv("ACCEFF_CONFIG")) else None,
            Path.cwd() / "acceff_config.toml",
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "acceff"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Keys without a matching field are dropped.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        name = field_info.name
        if name not in data:
            continue

        value = data[name]
        if is_dataclass(field_info.type) and isinstance(value, dict):
            value = _dict_to_dataclass(field_info.type, value)
        field_values[name] = value

    return cls(**field_values)


# Global configuration for acceff.
CFG = Config.load()
