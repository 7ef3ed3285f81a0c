# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import posixpath
from unittest.mock import patch

import pytest

from acceff_lib.core.error import AccEffError, AccEffMissingError, AccEffNotValidError
from acceff_lib.grid.vgrid import VGrid
from acceff_lib.merge import Merger
from acceff_lib.properties.settings import SubmitterSettings
from acceff_lib.submit import Submitter

REMOTE = "/alice/cern.ch/user/l/laphecet/Sim/JPsi"
MERGED = f"{REMOTE}/AODs"


def put(path: str, content: bytes = b""):
    VGrid._grid.makeDir(posixpath.dirname(path))
    VGrid._grid.writeFile(path, content)


def put_archives(directory: str, n: int):
    for i in range(1, n + 1):
        put(f"{directory}/{i:03d}/root_archive.zip")


@pytest.fixture(autouse=True)
def reset_vgrid():
    VGrid._grid.reset()
    VGrid._grid.makeDir(REMOTE)
    put(f"{REMOTE}/AOD_merge.jdl")
    put(f"{REMOTE}/AOD_merge_final.jdl")
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
        use_aod_merging=True,
        create_remote_dir=True,
        runs=[1000, 1001],
    )


@pytest.fixture
def merger(settings):
    return Merger(Submitter(settings, VGrid))


def jobs():
    return list(VGrid._grid.jobs.values())


def test_merge_final_stage(merger):
    put_archives(f"{REMOTE}/1000", 2)

    report = merger.merge()

    assert report.success
    assert [s.run for s in report.submissions] == [1000]
    assert report.skipped == [1001]
    assert report.n_jobs == 1

    assert len(jobs()) == 1
    assert jobs()[0].jdl == f"{REMOTE}/AOD_merge_final.jdl"
    assert jobs()[0].args == ["1000"]
    assert report.submissions[0].job_id == jobs()[0].job_id

    collection = VGrid._grid.files[f"{MERGED}/1000/wn.xml"].decode()
    assert collection.count("</event>") == 2
    assert f"{REMOTE}/1000/002/root_archive.zip" in collection
    assert VGrid.directoryExists(f"{MERGED}/1001")


def test_merge_final_stage_already_done(merger):
    put_archives(f"{REMOTE}/1000", 2)
    put(f"{MERGED}/1000/root_archive.zip")

    report = merger.merge()

    assert report.success
    assert report.skipped == [1000, 1001]
    assert jobs() == []


def test_merge_first_intermediate_stage(merger):
    put_archives(f"{REMOTE}/1000", 30)
    put_archives(f"{REMOTE}/1001", 11)

    report = merger.merge(stage=1)

    assert [s.run for s in report.submissions] == [1000, 1001]
    assert jobs()[0].jdl == f"{REMOTE}/AOD_merge.jdl"
    assert jobs()[0].args == ["1000", "1"]
    assert (
        VGrid._grid.files[f"{MERGED}/1000/Stage_1.xml"].decode().count("</event>") == 30
    )


def test_merge_next_stage_uses_previous_stage_outputs(merger):
    put_archives(f"{REMOTE}/1000", 30)
    put_archives(f"{MERGED}/1000/Stage_1", 12)

    report = merger.merge(stage=2)

    assert [s.run for s in report.submissions] == [1000]
    collection = VGrid._grid.files[f"{MERGED}/1000/Stage_2.xml"].decode()
    assert collection.count("</event>") == 12
    assert f"{MERGED}/1000/Stage_1/012/root_archive.zip" in collection


def test_merge_final_stage_after_intermediate_stages(merger):
    put_archives(f"{MERGED}/1000/Stage_1", 12)
    put_archives(f"{MERGED}/1000/Stage_2", 2)

    merger.merge()

    collection = VGrid._grid.files[f"{MERGED}/1000/wn.xml"].decode()
    assert collection.count("</event>") == 2
    assert "Stage_2/001/root_archive.zip" in collection


def test_merge_stage_out_of_order(merger):
    put_archives(f"{REMOTE}/1000", 30)

    report = merger.merge(stage=2)

    assert not report.success
    assert 1000 in report.failures
    assert "latest merging stage is 0, next must be stage 1" in report.failures[1000]
    assert jobs() == []


def test_merge_few_files_asks_once(merger):
    put_archives(f"{REMOTE}/1000", 3)
    put_archives(f"{REMOTE}/1001", 4)

    with patch("acceff_lib.merge.merger.yes_or_no_prompt", return_value=False) as mock_prompt:
        report = merger.merge(stage=1)

    mock_prompt.assert_called_once()
    assert report.skipped == [1000, 1001]
    assert jobs() == []


def test_merge_few_files_confirmed(merger):
    put_archives(f"{REMOTE}/1000", 3)

    with patch("acceff_lib.merge.merger.yes_or_no_prompt", return_value=True):
        report = merger.merge(stage=1)

    assert [s.run for s in report.submissions] == [1000]


def test_merge_few_files_with_yes_does_not_ask(merger):
    put_archives(f"{REMOTE}/1000", 3)

    with patch("acceff_lib.merge.merger.yes_or_no_prompt") as mock_prompt:
        report = merger.merge(stage=1, yes=True)

    mock_prompt.assert_not_called()
    assert [s.run for s in report.submissions] == [1000]


def test_merge_dry_run(merger):
    put_archives(f"{REMOTE}/1000", 2)

    report = merger.merge(dry_run=True)

    assert report.dry_run
    assert report.submissions[0].job_id is None
    assert report.submissions[0].command == f"submit {REMOTE}/AOD_merge_final.jdl 1000"
    assert jobs() == []
    assert f"{MERGED}/1000/wn.xml" not in VGrid._grid.files


def test_merge_rejected_by_grid(merger):
    put_archives(f"{REMOTE}/1000", 2)
    VGrid._grid.rejected_args.add("1000")

    report = merger.merge()

    assert report.failures == {1000: "Run 1000: the Grid returned no valid job id."}


def test_merge_custom_merged_dir(settings):
    settings.merged_dir = "/alice/merged"
    put_archives(f"{REMOTE}/1000", 2)

    Merger(Submitter(settings, VGrid)).merge()

    assert "/alice/merged/1000/wn.xml" in VGrid._grid.files


def test_merge_missing_merged_dir(settings):
    settings.create_remote_dir = False

    with pytest.raises(AccEffMissingError, match="does not exist"):
        Merger(Submitter(settings, VGrid)).merge()


def test_merge_missing_jdl(merger):
    VGrid._grid.removeFile(f"{REMOTE}/AOD_merge.jdl")

    with pytest.raises(AccEffMissingError, match="AOD_merge.jdl' does not exist"):
        merger.merge(stage=1)


def test_merge_negative_stage(merger):
    with pytest.raises(AccEffError, match="must not be negative"):
        merger.merge(stage=-1)


def test_merge_invalid_submitter(settings):
    VGrid._grid.connected = False
    merger = Merger(Submitter(settings, VGrid))
    VGrid._grid.connected = True

    with pytest.raises(AccEffNotValidError):
        merger.merge()


def test_merge_without_runs(settings):
    settings.runs = []

    with pytest.raises(AccEffMissingError, match="No run to work with"):
        Merger(Submitter(settings, VGrid)).merge()


def test_last_stage(merger):
    assert merger.lastStage(f"{MERGED}/1000") == 0

    put_archives(f"{MERGED}/1000/Stage_1", 1)
    put_archives(f"{MERGED}/1000/Stage_3", 1)
    put(f"{MERGED}/1000/Stage_4.xml")

    assert merger.lastStage(f"{MERGED}/1000") == 3
