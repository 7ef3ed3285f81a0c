# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import re
import tempfile
from pathlib import Path

from acceff_lib.core.common import yes_or_no_prompt
from acceff_lib.core.config import CFG
from acceff_lib.core.error import (
    AccEffError,
    AccEffMissingError,
    AccEffNotValidError,
    AccEffSubmissionError,
)
from acceff_lib.core.error_handlers import handle_run_error
from acceff_lib.core.logger import get_logger
from acceff_lib.core.repeater import Repeater
from acceff_lib.submit.report import RunSubmission, SubmissionReport
from acceff_lib.submit.submitter import Submitter

logger = get_logger(__name__)

_STAGE_PATTERN = re.compile(r"^Stage_(\d+)/$")


class Merger:
    """
    Submits the jobs merging the AODs produced by a production.

    Merging proceeds in stages. Intermediate stages (1, 2, ...) merge the
    outputs of the previous stage by groups, the final stage (0) merges
    everything into a single archive per run. The merged outputs of run
    `<run>` are stored in `<merged_dir>/<run>`.
    """

    def __init__(self, submitter: Submitter):
        """
        Initialize the merger of a production.

        Args:
            submitter (Submitter): Submitter of the production to merge.
        """
        self._submitter = submitter
        self._grid = submitter.getGrid()

        # answer to the split-level question, asked at most once per merging
        self._confirmed: bool | None = None

    def merge(
        self, stage: int = 0, dry_run: bool = False, yes: bool = False
    ) -> SubmissionReport:
        """
        Submit one merging job per run.

        Args:
            stage (int): Merging stage. 0 is the final merging.
            dry_run (bool): Only print the commands that would be issued.
            yes (bool): Do not ask for confirmation when merging few files.

        Returns:
            SubmissionReport: The jobs submitted and the runs that failed.

        Raises:
            AccEffNotValidError: If the submitter is invalid.
            AccEffMissingError: If the merged directory or the JDL does not exist,
                or if there is no run.
        """
        if stage < 0:
            raise AccEffError(f"Merging stage must not be negative, not {stage}.")

        if not self._submitter.isValid():
            raise AccEffNotValidError(
                f"Invalid submitter: {' '.join(self._submitter.getProblems())}"
            )

        settings = self._submitter.getSettings()
        self._grid.ensureDirectory(settings.mergedDir, settings.create_remote_dir)

        name = (
            CFG.submitter.final_merge_jdl_name
            if stage == 0
            else CFG.submitter.merge_jdl_name
        )
        jdl = self._submitter.remotePath(Path(name))
        if not self._grid.fileExists(jdl):
            raise AccEffMissingError(
                f"Merging JDL '{jdl}' does not exist. Upload the production files with AOD merging enabled."
            )

        if not (runs := self._submitter.getScalers().getRunList()):
            raise AccEffMissingError("No run to work with.")

        self._confirmed = None
        repeater = Repeater(runs, self._mergeRun, stage, jdl, dry_run, yes)
        repeater.onException(AccEffError, handle_run_error)
        repeater.run()

        report = SubmissionReport.fromRepeater(repeater, dry_run)
        if report.failures:
            logger.error(
                f"Failed run(s): {', '.join(str(r) for r in report.failed_runs)}."
            )
        return report

    def lastStage(self, run_dir: str) -> int:
        """
        Get the last merging stage performed in a run directory (0 if none).
        """
        stages = [
            int(m.group(1))
            for name in self._grid.ls(run_dir, classify=True).names()
            if (m := _STAGE_PATTERN.match(name))
        ]
        return max(stages, default=0)

    def _mergeRun(
        self, run: int, stage: int, jdl: str, dry_run: bool, yes: bool
    ) -> RunSubmission | None:
        """
        Prepare the collection of files to merge for a run and submit its merging job.

        Returns:
            RunSubmission | None: The submission, or None if the run was skipped.

        Raises:
            AccEffSubmissionError: If the stage is out of order or the job could not be submitted.
        """
        settings = self._submitter.getSettings()
        run_dir = f"{settings.mergedDir.rstrip('/')}/{run}"

        logger.info(f"Processing run {run}.")
        if not self._grid.directoryExists(run_dir):
            logger.info(f"Creating output directory '{run_dir}'.")
            self._grid.mkdir(run_dir)

        if self._grid.fileExists(f"{run_dir}/{CFG.merger.archive_name}"):
            logger.warning(f"Run {run}: final merging already done. Skipping.")
            return None

        last = self.lastStage(run_dir)
        if stage > 0 and stage != last + 1:
            raise AccEffSubmissionError(
                run,
                f"latest merging stage is {last}, next must be stage {last + 1} or the final stage.",
            )

        collection = f"Stage_{stage}.xml" if stage > 0 else CFG.merger.final_collection
        if last == 0:
            source = f"{settings.remote_dir.rstrip('/')}/{run}"
        else:
            source = f"{run_dir}/Stage_{last}"

        text = self._grid.findCollection(
            source, f"*{CFG.merger.archive_name}", collection
        )
        n_files = text.count("</event>")
        logger.info(f"Run {run}: {n_files} file(s) to merge.")

        if n_files == 0:
            logger.warning(f"Run {run}: collection of files to merge is empty. Skipping.")
            return None

        if (
            stage > 0
            and n_files <= CFG.merger.split_level
            and not yes
            and not self._confirm()
        ):
            logger.info(f"Run {run}: skipped.")
            return None

        args = [str(run), str(stage)] if stage > 0 else [str(run)]
        command = f"submit {jdl} {' '.join(args)}"

        if dry_run:
            logger.info(command)
            return RunSubmission(run, None, None, command)

        self._uploadCollection(text, f"{run_dir}/{collection}")

        logger.debug(command)
        job_id = self._grid.submit(jdl, args).getKey(0, "jobId")
        if not job_id.isdecimal():
            raise AccEffSubmissionError(run, "the Grid returned no valid job id.")

        logger.info(f"Run {run}: submitted merging job {job_id}.")
        return RunSubmission(run, None, job_id, command)

    def _confirm(self) -> bool:
        if self._confirmed is None:
            self._confirmed = yes_or_no_prompt(
                f"Number of files to merge does not exceed the split level ({CFG.merger.split_level}). Continue?"
            )
        return self._confirmed

    def _uploadCollection(self, text: str, remote: str) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            local = Path(tmp) / Path(remote).name
            local.write_text(text)
            self._grid.upload(local, remote)
