# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Settings of a single acceptance x efficiency production.

`SubmitterSettings` gathers everything a `Submitter` needs to know about a
production: the template, local, snapshot, remote and merged directories,
the software packages, the event-count policy, the output flags, the run
list and the template variables. Settings are loaded from a YAML file and
can be overridden from the command line.
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Self

from acceff_lib.core.common import read_yaml, split_runs
from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError

from .packages import Packages


def _default_template_dir() -> Path:
    alice_root = os.environ.get(CFG.env_vars.alice_root, "")
    return Path(alice_root) / CFG.submitter.template_subdir


@dataclass
class SubmitterSettings:
    """
    Dataclass storing the settings of a production.
    """

    # Grid directory where the files are uploaded and from which jobs are submitted
    remote_dir: str = ""

    # Local directory where the template files are instantiated
    local_dir: Path = field(default_factory=Path.cwd)

    # Directory containing the template files
    template_dir: Path = field(default_factory=_default_template_dir)

    # Directory containing the OCDB/<run>/OCDB_*.root snapshots (defaults to local_dir)
    snapshot_dir: Path | None = None

    # Grid directory where the merged outputs are stored (defaults to <remote_dir>/AODs)
    merged_dir: str | None = None

    # Create the remote directory if it does not exist
    create_remote_dir: bool = False

    # OCDB path used by the simulation and the trigger scalers
    ocdb_path: str = CFG.submitter.ocdb_path

    # Software packages used by the jobs
    packages: Packages = field(default_factory=Packages)

    # Name of the generator macro (without the .C extension)
    generator: str = CFG.submitter.generator

    # Name of a configuration macro to use instead of Config.C
    external_config: str | None = None

    # Trigger used to compute the number of events to generate
    reference_trigger: str = ""

    # Number of generated events per reference trigger (not positive = fixed number)
    ratio: float = CFG.submitter.ratio

    # Number of events generated per run when ratio is not positive
    fixed_nof_events: int = CFG.submitter.fixed_nof_events

    # Maximum number of events in a single job
    max_events_per_chunk: int = CFG.submitter.max_events_per_chunk

    # Maximum number of input files of a single merging job
    split_max_input_file_number: int = CFG.submitter.split_max_input_file_number

    # 0 keeps all outputs, 1 keeps only muon AODs
    compact_mode: int = CFG.submitter.compact_mode

    # Overwrite existing local files
    overwrite_files: bool = False

    # Produce and ship OCDB snapshots
    use_ocdb_snapshots: bool = CFG.submitter.use_ocdb_snapshots

    # Generate the JDL files needed to merge the AODs
    use_aod_merging: bool = CFG.submitter.use_aod_merging

    # Compile the generator macro before accepting it
    check_compilation: bool = CFG.submitter.check_compilation

    # Explicit list of runs
    runs: list[int] = field(default_factory=list)

    # Text file containing the list of runs
    run_list_file: Path | None = None

    # YAML file containing the trigger scalers of the runs
    scalers_file: Path | None = None

    # Template variables set on top of the default ones
    variables: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.compact_mode not in (0, 1):
            raise AccEffError(f"Unknown compact mode '{self.compact_mode}'.")
        if self.max_events_per_chunk <= 0:
            raise AccEffError("The maximum number of events per chunk must be positive.")

    @property
    def snapshotDir(self) -> Path:
        """Directory containing the OCDB snapshots."""
        return self.snapshot_dir if self.snapshot_dir is not None else self.local_dir

    @property
    def mergedDir(self) -> str:
        """Grid directory where the merged outputs are stored."""
        if self.merged_dir:
            return self.merged_dir
        return f"{self.remote_dir.rstrip('/')}/AODs"

    @property
    def usesRatio(self) -> bool:
        """Whether the number of events is proportional to a trigger count."""
        return self.ratio > 0

    def getRuns(self) -> list[int]:
        """
        Get the runs of the production, from the explicit list and the run-list file.
        """
        runs = list(self.runs)
        if self.run_list_file:
            if not self.run_list_file.is_file():
                raise AccEffError(f"Run list '{self.run_list_file}' does not exist.")
            runs.extend(r for r in split_runs(self.run_list_file.read_text()) if r not in runs)
        return runs

    def updated(self, **overrides: Any) -> Self:
        """
        Return a copy of the settings with the non-None overrides applied.
        """
        valid = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if v is not None and k in valid}
        return replace(self, **changes)

    @classmethod
    def fromFile(cls, file: Path) -> Self:
        """
        Load settings from a YAML file.

        Relative paths are resolved with respect to the directory of the file.

        Raises:
            AccEffError: If the file cannot be read or contains unknown keys.
        """
        data = read_yaml(file) or {}
        if not isinstance(data, dict):
            raise AccEffError(f"Settings file '{file}' must contain a mapping.")
        return cls.fromDict(data, file.resolve().parent)

    @classmethod
    def fromDict(cls, data: dict[str, Any], base_dir: Path | None = None) -> Self:
        """
        Build settings from a dictionary.
        """
        valid = {f.name for f in fields(cls)}
        if unknown := sorted(set(data) - valid):
            raise AccEffError(f"Unknown production setting(s): {', '.join(unknown)}.")

        base_dir = base_dir or Path.cwd()
        values = dict(data)

        for key in (
            "local_dir",
            "template_dir",
            "snapshot_dir",
            "run_list_file",
            "scalers_file",
        ):
            if values.get(key) is not None:
                path = Path(os.path.expandvars(str(values[key]))).expanduser()
                values[key] = path if path.is_absolute() else base_dir / path

        if "packages" in values:
            values["packages"] = Packages.fromDict(values["packages"])

        if "runs" in values:
            runs = values["runs"]
            values["runs"] = [runs] if isinstance(runs, int) else [int(r) for r in runs]

        if "variables" in values:
            values["variables"] = {
                str(k): str(v) for k, v in (values["variables"] or {}).items()
            }

        return cls(**values)
