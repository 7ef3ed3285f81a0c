# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import shutil
import subprocess
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any

from acceff_lib.core.config import CFG
from acceff_lib.core.error import (
    AccEffError,
    AccEffMissingError,
    AccEffNotValidError,
    AccEffSubmissionError,
    AccEffUnresolvedVariableError,
)
from acceff_lib.core.error_handlers import handle_file_error, handle_run_error
from acceff_lib.core.logger import get_logger
from acceff_lib.core.repeater import Repeater
from acceff_lib.grid.interface import GridInterface, GridMeta
from acceff_lib.jdl import (
    generate_merge_jdl,
    generate_run_jdl,
    is_final_merge_jdl,
    is_jdl,
)
from acceff_lib.properties.mode import Mode
from acceff_lib.properties.settings import SubmitterSettings
from acceff_lib.scalers import (
    ScalersInterface,
    StaticScalers,
    make_scalers,
    read_run_list,
)
from acceff_lib.templates import (
    DEFAULT_VARIABLES,
    VariableStore,
    find_variables,
    replace_variables,
)

from .planner import plan_chunks, target_events
from .report import RunSubmission, SubmissionReport

logger = get_logger(__name__)

# files needed by every production
COMMON_TEMPLATE_FILES = ["CheckESD.C", "CheckAOD.C", "AODtrain.C", "validation.sh"]

# simulation and reconstruction macros
SIMULATION_TEMPLATE_FILES = ["rec.C", "sim.C", "simrun.C"]

# scripts needed by the merging jobs
MERGING_TEMPLATE_FILES = ["AOD_merge.sh", "validation_merge.sh"]


class Submitter:
    """
    Prepares, uploads and submits a simulation production anchored to real runs.

    The submitter instantiates the template files of the production in a local
    directory, produces the OCDB snapshots of the runs, copies everything to a
    remote Grid directory and submits one master job per run split into chunks.

    A submitter is valid only if the Grid can be reached, the remote directory
    exists and the generator macro is usable. Operations touching files or the
    Grid raise `AccEffNotValidError` on an invalid submitter.
    """

    def __init__(
        self,
        settings: SubmitterSettings,
        grid: type[GridInterface] | None = None,
        scalers: ScalersInterface | None = None,
    ):
        """
        Initialize the submitter and validate it.

        Args:
            settings (SubmitterSettings): Settings of the production.
            grid (type[GridInterface] | None): Grid backend to use.
                If not provided, it is obtained from the environment or the configuration.
            scalers (ScalersInterface | None): Source of the runs and trigger counts.
                If not provided, it is built from the settings.
        """
        self._settings = settings
        self._grid = grid or GridMeta.obtain(None)
        self._scalers = scalers if scalers is not None else make_scalers(settings)

        # problems making the submitter invalid, by the name of the failed check
        self._problems: dict[str, str] = {}

        self._vars = VariableStore(DEFAULT_VARIABLES)
        self._vars.set("VAR_OCDB_PATH", f'"{settings.ocdb_path}"')
        self._setSnapshotVariable()
        for name, value in settings.variables.items():
            self._vars.set(name, value)

        self._check("grid", self._grid.connect)
        if self._problems:
            # nothing else can be checked without the Grid
            return

        self._check("remote", self._validateRemoteDir)
        self._check("generator", self._validateGenerator)

    def getSettings(self) -> SubmitterSettings:
        return self._settings

    def getGrid(self) -> type[GridInterface]:
        return self._grid

    def getScalers(self) -> ScalersInterface:
        return self._scalers

    def getVariables(self) -> VariableStore:
        return self._vars

    def getProblems(self) -> list[str]:
        """Get the reasons why the submitter is invalid."""
        return list(self._problems.values())

    def isValid(self) -> bool:
        return not self._problems

    def templateFiles(self) -> list[str]:
        """
        Get the names of the files of the production.

        All of them except the JDL files are taken from the template directory,
        JDL files are generated.
        """
        s = self._settings
        files = [
            *COMMON_TEMPLATE_FILES,
            s.external_config or "Config.C",
            *SIMULATION_TEMPLATE_FILES,
            CFG.submitter.run_jdl_name,
            f"{s.generator}.C",
        ]

        if s.use_aod_merging:
            files.extend(
                [
                    CFG.submitter.merge_jdl_name,
                    CFG.submitter.final_merge_jdl_name,
                    *MERGING_TEMPLATE_FILES,
                ]
            )

        return files

    def snapshotFiles(self, run: int) -> list[Path]:
        """Get the paths to the OCDB snapshots of a run."""
        directory = self._settings.snapshotDir.resolve() / "OCDB" / str(run)
        return [
            directory / f"{CFG.templates.snapshot_marker}{t}.root"
            for t in CFG.templates.snapshot_types
        ]

    def localFiles(self) -> list[Path]:
        """
        Get the files to upload to the Grid.

        Template files are relative to the local directory,
        existing OCDB snapshots are absolute paths.
        """
        files = [Path(name) for name in self.templateFiles()]
        if self._settings.use_ocdb_snapshots:
            for run in self._scalers.getRunList():
                files.extend(f for f in self.snapshotFiles(run) if f.is_file())

        return files

    def localPath(self, file: Path) -> Path:
        """Get the path to a local file."""
        return self._settings.local_dir / file

    def remotePath(self, file: Path) -> str:
        """
        Get the Grid path of a local file.

        OCDB snapshots keep their path relative to the snapshot directory.
        """
        remote = self._settings.remote_dir.rstrip("/")
        if file.is_absolute():
            file = file.relative_to(self._settings.snapshotDir.resolve())
        return f"{remote}/{file.as_posix()}"

    def setVar(self, name: str, value: str) -> None:
        """Set (or overwrite) a template variable."""
        self._vars.set(name, value)

    def setGenerator(self, generator: str) -> bool:
        """
        Use a different generator macro and validate it.

        Returns:
            bool: Whether the submitter is valid afterwards.
        """
        self._settings = self._settings.updated(generator=generator.removesuffix(".C"))
        self._check("generator", self._validateGenerator)
        return self.isValid()

    def setRemoteDir(self, directory: str, create: bool = False) -> bool:
        """
        Use a different remote directory, creating it if requested.

        Returns:
            bool: Whether the submitter is valid afterwards.
        """
        self._settings = self._settings.updated(
            remote_dir=directory, create_remote_dir=create
        )
        self._check("remote", self._validateRemoteDir)
        return self.isValid()

    def setMergedDir(self, directory: str, create: bool = False) -> None:
        """
        Use a different remote directory for the merged outputs.

        Raises:
            AccEffMissingError: If the directory does not exist and `create` is False.
        """
        self._grid.ensureDirectory(directory, create)
        self._settings = self._settings.updated(merged_dir=directory)

    def setRunList(self, runs: int | Iterable[int] | Path) -> None:
        """
        Use a different list of runs.

        Trigger counts of the current scalers are kept if they provide any.
        """
        run_list = read_run_list(runs)
        self._settings = replace(self._settings, runs=run_list, run_list_file=None)
        if self._settings.scalers_file:
            self._scalers = make_scalers(self._settings)
        else:
            self._scalers = StaticScalers(run_list)

    def setOCDBSnapshotDir(self, directory: Path) -> None:
        """
        Use OCDB snapshots from a different directory.

        Raises:
            AccEffMissingError: If the directory has no OCDB subdirectory.
        """
        if not (directory / "OCDB").is_dir():
            raise AccEffMissingError(
                f"Directory '{directory}' does not contain an OCDB subdirectory."
            )
        self._settings = self._settings.updated(snapshot_dir=directory)

    def useOCDBSnapshots(self, flag: bool) -> None:
        self._settings = self._settings.updated(use_ocdb_snapshots=flag)
        self._setSnapshotVariable()

    def useAODMerging(self, flag: bool) -> None:
        self._settings = self._settings.updated(use_aod_merging=flag)

    def checkCompilation(self, file: Path) -> None:
        """
        Check that a macro compiles once its variables are substituted.

        The macro is copied to a temporary directory and compiled with ROOT's ACLiC.
        Does nothing if the compilation check is disabled.

        Raises:
            AccEffError: If the macro does not compile.
        """
        if not self._settings.check_compilation:
            logger.debug(f"Compilation check of '{file}' is disabled.")
            return

        alice_root = os.environ.get(CFG.env_vars.alice_root, "")
        includes = " ".join(f"-I{alice_root}/{d}" for d in CFG.commands.include_dirs)

        with tempfile.TemporaryDirectory() as tmp:
            copy = Path(tmp) / f"tmp{file.name}"
            shutil.copyfile(file, copy)
            replace_variables(copy, self._vars)

            command = [
                CFG.commands.root,
                "-b",
                "-q",
                "-l",
                "-e",
                f'gSystem->AddIncludePath("{includes}");',
                "-e",
                f'if (gROOT->LoadMacro("{copy.name}++")) gSystem->Exit(1);',
            ]
            result = Submitter._execute(command, Path(tmp))

        if result.returncode != 0:
            logger.debug(result.stdout)
            raise AccEffError(
                f"Macro '{file}' does not compile: {result.stderr.strip()}"
            )
        logger.debug(f"Macro '{file}' compiles.")

    def copyTemplateFilesToLocal(self) -> list[Path]:
        """
        Instantiate the template files of the production in the local directory.

        JDL files are generated, the other files are copied from the template
        directory with their variables substituted. Existing files are only
        overwritten if `overwrite_files` is set. Files that do not collide
        with an existing one are written even when others do.

        Returns:
            list[Path]: The files written.

        Raises:
            AccEffError: If any file already exists or could not be instantiated.
        """
        self._ensureValid()

        local_dir = self._settings.local_dir
        local_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            f"Copying template files from '{self._settings.template_dir}' to '{local_dir}'."
        )

        collisions = []
        files = []
        for name in self.templateFiles():
            target = local_dir / name
            if target.exists() and not self._settings.overwrite_files:
                logger.error(f"Local file '{target}' already exists.")
                collisions.append(name)
            else:
                files.append(name)

        repeater = Submitter._repeat(
            files, self._instantiate, handle_file_error, "Could not instantiate"
        )

        if collisions:
            raise AccEffError(
                f"{len(collisions)} local file(s) could not be overwritten. "
                "Remove them or enable overwriting of local files."
            )

        return [repeater.results[i] for i in sorted(repeater.results)]

    def makeOCDBSnapshots(self) -> None:
        """
        Make the OCDB snapshots of all runs that do not have them yet.

        Snapshots are made by running `simrun.C --snapshot` in the local directory.

        Raises:
            AccEffError: If the snapshots of any run could not be made.
        """
        self._ensureValid()

        if not self._settings.use_ocdb_snapshots:
            logger.info("OCDB snapshots are not used. Nothing to make.")
            return

        Submitter._repeat(
            self._scalers.getRunList(),
            self._makeSnapshots,
            handle_run_error,
            "Could not make the OCDB snapshots of run(s)",
        )

    def copyLocalFilesToRemote(self) -> None:
        """
        Upload all local files to the remote directory.

        Raises:
            AccEffMissingError: If the remote directory does not exist.
            AccEffError: If any file could not be uploaded.
        """
        self._ensureValid()
        remote = self._grid.ensureDirectory(self._settings.remote_dir, create=False)

        logger.info(f"Copying local files to '{remote}'.")
        Submitter._repeat(
            self.localFiles(), self._upload, handle_file_error, "Could not upload"
        )

    def checkLocal(self) -> list[Path]:
        """
        Get the local files that are missing.
        """
        missing = []
        for file in self.localFiles():
            if not (path := self.localPath(file)).is_file():
                logger.warning(f"Local file '{path}' is missing.")
                missing.append(path)

        if not missing:
            logger.info("All local files are present.")
        return missing

    def checkRemote(self) -> list[str]:
        """
        Get the remote copies of the local files that are missing.
        """
        self._ensureValid()

        missing = []
        for file in self.localFiles():
            if not self._grid.fileExists(remote := self.remotePath(file)):
                logger.warning(f"Remote file '{remote}' is missing.")
                missing.append(remote)

        if not missing:
            logger.info("All remote files are present.")
        return missing

    def cleanLocal(self, clean_snapshots: bool = False) -> list[Path]:
        """
        Remove the local files of the production.

        Args:
            clean_snapshots (bool): Remove also the OCDB snapshots.

        Returns:
            list[Path]: The files removed.
        """
        removed = []
        for file in self.localFiles():
            if not clean_snapshots and CFG.templates.snapshot_marker in file.name:
                logger.debug(f"Keeping OCDB snapshot '{file}'.")
                continue

            if (path := self.localPath(file)).is_file():
                logger.debug(f"Removing local file '{path}'.")
                path.unlink()
                removed.append(path)

        logger.info(f"Removed {len(removed)} local file(s).")
        return removed

    def cleanRemote(self) -> list[str]:
        """
        Remove the remote copies of the local files.

        Returns:
            list[str]: The remote files removed.

        Raises:
            AccEffError: If any file could not be removed.
        """
        self._ensureValid()

        repeater = Submitter._repeat(
            self.localFiles(),
            self._removeRemote,
            handle_file_error,
            "Could not remove the remote copy of",
        )
        removed = [r for r in repeater.results.values() if r]

        logger.info(f"Removed {len(removed)} remote file(s).")
        return removed

    def submit(self, dry_run: bool = False) -> SubmissionReport:
        """
        Submit one master job per run.

        The number of events of a run is either fixed or proportional to its
        count of reference triggers. It is split into the smallest number of
        chunks not exceeding the maximal number of events per chunk.
        A failure to submit a run is recorded and the other runs are submitted.

        Args:
            dry_run (bool): Only print the commands that would be issued.

        Returns:
            SubmissionReport: The jobs submitted and the runs that failed.

        Raises:
            AccEffMissingError: If the run JDL is not on the Grid or there is no run.
            AccEffError: If the events are proportional to triggers and no trigger is set.
        """
        self._ensureValid()

        jdl = self.remotePath(Path(CFG.submitter.run_jdl_name))
        if not self._grid.fileExists(jdl):
            raise AccEffMissingError(
                f"Run JDL '{jdl}' does not exist. Upload the production files first."
            )

        if not (runs := self._scalers.getRunList()):
            raise AccEffMissingError("No run to work with.")

        if self._settings.usesRatio and not self._settings.reference_trigger:
            raise AccEffError(
                "The number of events is proportional to a trigger count "
                "but no reference trigger is set."
            )

        repeater = Repeater(runs, self._submitRun, jdl, dry_run)
        repeater.onException(AccEffError, handle_run_error)
        repeater.run()

        report = SubmissionReport.fromRepeater(repeater, dry_run)
        logger.info(
            f"{'Would submit' if dry_run else 'Submitted'} {report.n_jobs} job(s) "
            f"generating {report.n_events} events for {len(report.submissions)} run(s)."
        )
        return report

    def eventsForRun(self, run: int) -> int:
        """
        Get the number of events to generate for a run.

        Raises:
            AccEffSubmissionError: If the trigger count of the run is not known.
        """
        if not self._settings.usesRatio:
            return self._settings.fixed_nof_events

        trigger = self._settings.reference_trigger
        level = CFG.submitter.trigger_level
        count = self._scalers.getTriggerCount(run, trigger, level)
        if count is None:
            raise AccEffSubmissionError(
                run, f"no {level} scaler for trigger '{trigger}'."
            )

        return target_events(self._settings.ratio, count)

    def run(self, mode: Mode) -> SubmissionReport | None:
        """
        Execute the steps of the given mode.

        Returns:
            SubmissionReport | None: The submission report for the modes submitting jobs.
        """
        handlers: dict[Mode, Callable[[], SubmissionReport | None]] = {
            Mode.LOCAL: self._runLocal,
            Mode.OCDB: self._runOCDB,
            Mode.UPLOAD: self._runUpload,
            Mode.SUBMIT: self._runSubmit,
            Mode.TEST: self._runTest,
            Mode.FULL: self._runFull,
        }

        logger.debug(f"Running in mode '{mode}'.")
        return handlers[mode]()

    def _runLocal(self) -> None:
        self.copyTemplateFilesToLocal()

    def _runOCDB(self) -> None:
        self.copyTemplateFilesToLocal()
        self.makeOCDBSnapshots()

    def _runUpload(self) -> None:
        self.copyLocalFilesToRemote()

    def _runSubmit(self) -> SubmissionReport:
        return self.submit(dry_run=False)

    def _runTest(self) -> SubmissionReport:
        self._runOCDB()
        self.copyLocalFilesToRemote()
        return self.submit(dry_run=True)

    def _runFull(self) -> SubmissionReport:
        self._runOCDB()
        self.copyLocalFilesToRemote()
        return self.submit(dry_run=False)

    def _check(self, name: str, func: Callable[[], Any]) -> None:
        """
        Run a validity check, recording its failure as a problem.
        """
        try:
            func()
            self._problems.pop(name, None)
        except AccEffError as e:
            logger.error(e)
            self._problems[name] = str(e)

    def _ensureValid(self) -> None:
        if not self.isValid():
            raise AccEffNotValidError(
                f"Invalid submitter: {' '.join(self.getProblems())}"
            )

    def _setSnapshotVariable(self) -> None:
        self._vars.set(
            "VAR_OCDB_SNAPSHOT",
            "kTRUE" if self._settings.use_ocdb_snapshots else "kFALSE",
        )

    def _validateRemoteDir(self) -> None:
        if not self._settings.remote_dir:
            raise AccEffMissingError("No remote directory specified.")

        self._grid.ensureDirectory(
            self._settings.remote_dir, self._settings.create_remote_dir
        )

    def _validateGenerator(self) -> None:
        """
        Check that the generator macro exists, that all its variables
        are defined and that it compiles.
        """
        generator = self._settings.generator
        macro = self._settings.template_dir / f"{generator}.C"
        if not macro.is_file():
            raise AccEffMissingError(f"Generator macro '{macro}' does not exist.")

        missing = [v for v in find_variables(macro) if v not in self._vars]
        if missing:
            raise AccEffUnresolvedVariableError(str(macro), missing)

        self.checkCompilation(macro)
        self._vars.set("VAR_GENERATOR", generator)

    def _instantiate(self, name: str) -> Path:
        """
        Write a single file of the production to the local directory.
        """
        target = self._settings.local_dir / name

        if is_jdl(name):
            if name in (CFG.submitter.merge_jdl_name, CFG.submitter.final_merge_jdl_name):
                text = generate_merge_jdl(self._settings, is_final_merge_jdl(name))
            else:
                text = generate_run_jdl(self._settings, self.templateFiles())
            target.write_text(text)
            logger.debug(f"Generated '{target}'.")
            return target

        source = self._settings.template_dir / name
        if not source.is_file():
            raise AccEffMissingError(f"Template file '{source}' does not exist.")

        # substitute in memory so that nothing is written on an unresolved variable
        text = self._vars.substitute(source.read_text(), str(source))
        target.write_text(text)
        shutil.copymode(source, target)
        logger.debug(f"Copied '{source}' to '{target}'.")
        return target

    def _makeSnapshots(self, run: int) -> None:
        files = self.snapshotFiles(run)
        if all(f.is_file() for f in files):
            logger.warning(f"OCDB snapshots of run {run} already exist. Skipping.")
            return

        logger.info(f"Making OCDB snapshots of run {run}.")
        command = [
            CFG.commands.aliroot,
            "-b",
            "-q",
            "-x",
            "simrun.C",
            "--run",
            str(run),
            "--snapshot",
        ]
        result = Submitter._execute(command, self._settings.local_dir)

        if missing := [f.name for f in files if not f.is_file()]:
            logger.debug(result.stdout)
            raise AccEffSubmissionError(
                run,
                f"could not make OCDB snapshot(s) {', '.join(missing)}: {result.stderr.strip()}",
            )

    def _upload(self, file: Path) -> None:
        self._grid.upload(self.localPath(file), self.remotePath(file))

    def _removeRemote(self, file: Path) -> str | None:
        remote = self.remotePath(file)
        if not self._grid.fileExists(remote):
            return None

        logger.debug(f"Removing remote file '{remote}'.")
        self._grid.remove(remote)
        return remote

    def _submitRun(self, run: int, jdl: str, dry_run: bool) -> RunSubmission:
        """
        Submit the master job of a single run.

        Raises:
            AccEffSubmissionError: If the job could not be submitted.
        """
        if self._settings.use_ocdb_snapshots:
            missing = [
                remote
                for remote in map(self.remotePath, self.snapshotFiles(run))
                if not self._grid.fileExists(remote)
            ]
            if missing:
                raise AccEffSubmissionError(
                    run, f"OCDB snapshot(s) not found on the Grid: {', '.join(missing)}."
                )

        n_events = self.eventsForRun(run)
        if n_events <= 0:
            raise AccEffSubmissionError(run, "no event to generate.")

        plan = plan_chunks(n_events, self._settings.max_events_per_chunk)
        args = [str(run), str(plan.n_chunks), str(plan.events_per_chunk)]
        command = f"submit {jdl} {' '.join(args)}"

        if dry_run:
            logger.info(command)
            return RunSubmission(run, plan, None, command)

        logger.debug(command)
        job_id = self._grid.submit(jdl, args).getKey(0, "jobId")
        if not job_id:
            raise AccEffSubmissionError(run, "the Grid returned no job id.")

        logger.info(
            f"Run {run}: submitted job {job_id} ({plan.n_chunks} x {plan.events_per_chunk} events)."
        )
        return RunSubmission(run, plan, job_id, command)

    @staticmethod
    def _repeat(
        items: list[Any],
        func: Callable,
        handler: Callable,
        failure: str,
    ) -> Repeater:
        """
        Apply `func` to all items, continuing on errors.

        Raises:
            AccEffError: Listing the failed items once all items were processed.
        """
        repeater = Repeater(items, func)
        repeater.onException(AccEffError, handler)
        repeater.run()

        if failed := repeater.failedItems():
            raise AccEffError(f"{failure}: {', '.join(str(f) for f in failed)}.")

        return repeater

    @staticmethod
    def _execute(command: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        """
        Run an external command in the given directory.

        Raises:
            AccEffError: If the command cannot be executed.
        """
        logger.debug(" ".join(command))
        try:
            return subprocess.run(
                command,
                cwd=cwd,
                text=True,
                check=False,
                capture_output=True,
                errors="replace",
            )
        except OSError as e:
            raise AccEffError(f"Could not execute '{command[0]}': {e}.") from e
