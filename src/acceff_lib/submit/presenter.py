# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from rich.console import Console, Group
from rich.padding import Padding
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from acceff_lib.core.common import get_panel_width
from acceff_lib.core.config import CFG

from .report import SubmissionReport
from .submitter import Submitter


class SubmitterPresenter:
    """
    Presentation layer for the configuration of a production and its submissions.
    """

    def __init__(self, submitter: Submitter):
        """
        Initialize the presenter with a Submitter.

        Args:
            submitter (Submitter): The submitter whose production is presented.
        """
        self._submitter = submitter

    def createConfigPanel(self, console: Console | None = None) -> Group:
        """
        Create a panel describing the configuration of the production.

        Args:
            console (Console | None): Optional Rich console.
                If not provided, a new Console is created.

        Returns:
            Group: A Rich Group containing the configuration panel.
        """
        console = console or Console()

        sections = []
        if not self._submitter.isValid():
            sections.extend(
                [
                    Text(
                        "INVALID OBJECT",
                        style=CFG.presenter.invalid_style,
                        justify="center",
                    ),
                    *(
                        Text(p, style=CFG.presenter.notes_style, justify="center")
                        for p in self._submitter.getProblems()
                    ),
                    Text(""),
                ]
            )

        sections.extend(
            [
                Padding(self._createSettingsTable(), (0, 2)),
                Text(""),
                self._createRule("VARIABLES"),
                Text(""),
                Padding(self._createVariablesTable(), (0, 2)),
                Text(""),
                self._createRule("FILES TO UPLOAD"),
                Text(""),
                Padding(self._createFilesTable(), (0, 2)),
            ]
        )

        panel = Panel(
            Group(*sections),
            title=Text(
                "PRODUCTION",
                style=CFG.presenter.title_style,
                justify="center",
            ),
            border_style=CFG.presenter.border_style,
            # no horizontal padding so Rule reaches borders
            padding=(1, 0),
            width=get_panel_width(
                console, 2, CFG.presenter.min_width, CFG.presenter.max_width
            ),
        )

        return Group(Text(""), panel, Text(""))

    def createReportPanel(
        self, report: SubmissionReport, console: Console | None = None
    ) -> Group:
        """
        Create a panel listing the jobs submitted for each run.

        Args:
            report (SubmissionReport): The outcome of the submission.
            console (Console | None): Optional Rich console.
                If not provided, a new Console is created.

        Returns:
            Group: A Rich Group containing the submission panel.
        """
        console = console or Console()

        table = Table(box=None, padding=(0, 2), header_style=CFG.presenter.key_style)
        table.add_column("Run", justify="right")
        table.add_column("Chunks", justify="right")
        table.add_column("Events/chunk", justify="right")
        table.add_column("Job", justify="left", overflow="fold")

        for s in report.submissions:
            table.add_row(
                str(s.run),
                str(s.plan.n_chunks) if s.plan else "-",
                str(s.plan.events_per_chunk) if s.plan else "-",
                Text(
                    s.job_id or "dry run",
                    style=CFG.presenter.submitted_style
                    if s.job_id
                    else CFG.presenter.notes_style,
                ),
            )

        for run in report.skipped:
            table.add_row(
                str(run), "-", "-", Text("skipped", style=CFG.presenter.notes_style)
            )

        for run, reason in report.failures.items():
            table.add_row(
                str(run), "-", "-", Text(reason, style=CFG.presenter.failed_style)
            )

        summary = Text(
            f"{report.n_jobs} job(s), {report.n_events} event(s), "
            f"{len(report.failures)} failed run(s)",
            style=CFG.presenter.notes_style,
            justify="center",
        )

        panel = Panel(
            Group(Padding(table, (0, 2)), Text(""), summary),
            title=Text(
                "DRY RUN" if report.dry_run else "SUBMISSION",
                style=CFG.presenter.title_style,
                justify="center",
            ),
            border_style=CFG.presenter.border_style,
            padding=(1, 0),
            width=get_panel_width(
                console, 2, CFG.presenter.min_width, CFG.presenter.max_width
            ),
        )

        return Group(Text(""), panel, Text(""))

    def _createSettingsTable(self) -> Table:
        """
        Create a table with the directories and the event policy of the production.
        """
        settings = self._submitter.getSettings()

        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(justify="right", style=CFG.presenter.key_style)
        table.add_column(
            justify="left", overflow="fold", style=CFG.presenter.value_style
        )

        table.add_row("Template directory:", Text(str(settings.template_dir)))
        table.add_row("Local directory:", Text(str(settings.local_dir)))
        table.add_row("Remote directory:", Text(settings.remote_dir))
        if settings.use_aod_merging:
            table.add_row("Merged directory:", Text(settings.mergedDir))
        if settings.use_ocdb_snapshots:
            table.add_row("Snapshot directory:", Text(str(settings.snapshotDir)))
        table.add_row("OCDB path:", Text(settings.ocdb_path))
        table.add_row("Generator:", Text(settings.generator))
        table.add_row("Packages:", Text("\n".join(settings.packages.toList())))

        if settings.usesRatio:
            events = f"{settings.ratio} x {settings.reference_trigger or '?'} ({CFG.submitter.trigger_level})"
        else:
            events = f"{settings.fixed_nof_events} per run"
        table.add_row("Events:", Text(events))
        table.add_row("Max events per chunk:", Text(str(settings.max_events_per_chunk)))
        table.add_row("Compact mode:", Text(str(settings.compact_mode)))

        scalers = self._submitter.getScalers()
        table.add_row(f"Runs ({len(scalers)}):", Text(str(scalers) or "none"))

        return table

    def _createVariablesTable(self) -> Table:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(justify="right", style=CFG.presenter.key_style)
        table.add_column(
            justify="left", overflow="fold", style=CFG.presenter.value_style
        )

        for name, value in sorted(self._submitter.getVariables().items()):
            table.add_row(name, Text(value))

        return table

    def _createFilesTable(self) -> Table:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(justify="left", overflow="fold", style=CFG.presenter.value_style)

        for file in self._submitter.localFiles():
            table.add_row(Text(str(file)))

        return table

    @staticmethod
    def _createRule(title: str) -> Rule:
        return Rule(
            title=Text(title, style=CFG.presenter.title_style),
            style=CFG.presenter.border_style,
        )
