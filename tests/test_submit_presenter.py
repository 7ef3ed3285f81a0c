# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import pytest
from rich.console import Console, Group

from acceff_lib.grid.vgrid import VGrid
from acceff_lib.properties.settings import SubmitterSettings
from acceff_lib.submit import (
    ChunkPlan,
    RunSubmission,
    SubmissionReport,
    Submitter,
    SubmitterPresenter,
)

REMOTE = "/alice/sim"


@pytest.fixture(autouse=True)
def reset_vgrid():
    VGrid._grid.reset()
    VGrid._grid.makeDir(REMOTE)
    yield
    VGrid._grid.reset()


@pytest.fixture
def settings(tmp_path):
    template_dir = tmp_path / "templates"
    template_dir.mkdir()
    (template_dir / "GenParamCustom.C").write_text("AliGenerator* GenParamCustom();\n")

    return SubmitterSettings(
        remote_dir=REMOTE,
        local_dir=tmp_path / "local",
        template_dir=template_dir,
        check_compilation=False,
        runs=[195682, 195683],
        reference_trigger="CMUL7",
        ratio=2.0,
    )


def render(renderable) -> str:
    console = Console(record=True, width=240)
    console.print(renderable)
    return console.export_text()


def test_config_panel(settings):
    presenter = SubmitterPresenter(Submitter(settings, VGrid))
    console = Console(width=240)

    panel = presenter.createConfigPanel(console)
    text = render(panel)

    assert isinstance(panel, Group)
    assert "PRODUCTION" in text
    assert "INVALID OBJECT" not in text
    assert "Generator:" in text
    assert "GenParamCustom" in text
    assert "2.0 x CMUL7 (L2A)" in text
    assert "195682 195683" in text
    assert "VARIABLES" in text
    assert "VAR_GENERATOR" in text
    assert "FILES TO UPLOAD" in text
    assert "simrun.C" in text
    # snapshots do not exist yet
    assert "OCDB_sim.root" not in text


def test_config_panel_invalid_submitter(settings):
    VGrid._grid.connected = False
    presenter = SubmitterPresenter(Submitter(settings, VGrid))

    text = render(presenter.createConfigPanel(Console(width=240)))

    assert "INVALID OBJECT" in text
    assert "Cannot connect to the virtual Grid." in text


def test_config_panel_fixed_events(settings):
    settings.ratio = 0
    settings.fixed_nof_events = 5000
    presenter = SubmitterPresenter(Submitter(settings, VGrid))

    assert "5000 per run" in render(presenter.createConfigPanel(Console(width=240)))


def test_report_panel(settings):
    presenter = SubmitterPresenter(Submitter(settings, VGrid))
    report = SubmissionReport(
        submissions=[
            RunSubmission(195682, ChunkPlan(1000, 2, 500), "3130287653", "submit"),
        ],
        failures={195683: "Run 195683: no L2A scaler for trigger 'CMUL7'."},
        skipped=[195684],
    )

    text = render(presenter.createReportPanel(report, Console(width=240)))

    assert "SUBMISSION" in text
    assert "3130287653" in text
    assert "no L2A scaler" in text
    assert "skipped" in text
    assert "2 job(s), 1000 event(s), 1 failed run(s)" in text


def test_report_panel_dry_run(settings):
    presenter = SubmitterPresenter(Submitter(settings, VGrid))
    report = SubmissionReport(
        dry_run=True,
        submissions=[RunSubmission(195682, ChunkPlan(1600, 3, 534))],
    )

    text = render(presenter.createReportPanel(report, Console(width=240)))

    assert "DRY RUN" in text
    assert "dry run" in text
    assert "534" in text
    assert "3 job(s), 1602 event(s), 0 failed run(s)" in text
