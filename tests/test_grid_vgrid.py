# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import pytest

from acceff_lib.core.error import AccEffConnectionError, AccEffError, AccEffMissingError
from acceff_lib.grid.vgrid import VGrid
from acceff_lib.grid.vgrid.system import VGridError, VirtualGridSystem, make_xml_collection


@pytest.fixture(autouse=True)
def reset_vgrid():
    VGrid._grid.reset()
    yield
    VGrid._grid.reset()


def test_virtual_grid_make_dir_creates_parents():
    system = VirtualGridSystem()
    system.makeDir("/alice/sim/JPsi/")

    assert {"/", "/alice", "/alice/sim", "/alice/sim/JPsi"} <= system.directories


def test_virtual_grid_write_file_requires_parent():
    system = VirtualGridSystem()

    with pytest.raises(VGridError, match="does not exist"):
        system.writeFile("/alice/run.jdl", b"")


def test_virtual_grid_list_path():
    system = VirtualGridSystem()
    system.makeDir("/alice/sim/OCDB")
    system.writeFile("/alice/sim/run.jdl", b"")

    assert system.listPath("/alice/sim", classify=True) == ["OCDB/", "run.jdl"]
    assert system.listPath("/alice/sim", classify=False) == ["OCDB", "run.jdl"]
    assert system.listPath("/alice/sim/run.jdl", classify=True) == ["run.jdl"]
    assert system.listPath("/alice/missing", classify=True) == []


def test_virtual_grid_find_files():
    system = VirtualGridSystem()
    system.makeDir("/alice/sim/195682/001")
    system.makeDir("/alice/sim/195682/002")
    system.writeFile("/alice/sim/195682/001/root_archive.zip", b"")
    system.writeFile("/alice/sim/195682/002/root_archive.zip", b"")
    system.writeFile("/alice/sim/195682/002/log_archive.zip", b"")

    assert system.findFiles("/alice/sim/195682", "*root_archive.zip") == [
        "/alice/sim/195682/001/root_archive.zip",
        "/alice/sim/195682/002/root_archive.zip",
    ]


def test_make_xml_collection():
    text = make_xml_collection("wn.xml", ["/alice/a/root_archive.zip", "/alice/b/root_archive.zip"])

    assert '<collection name="wn.xml">' in text
    assert text.count("</event>") == 2
    assert 'lfn="/alice/b/root_archive.zip"' in text


def test_vgrid_connect():
    VGrid.connect()

    VGrid._grid.connected = False
    with pytest.raises(AccEffConnectionError):
        VGrid.connect()


def test_vgrid_directory_and_file_exist(tmp_path):
    local = tmp_path / "run.jdl"
    local.write_text("Executable = x;\n")
    VGrid.mkdir("/alice/sim")
    VGrid.copy(local, "/alice/sim/run.jdl")

    assert VGrid.directoryExists("/alice/sim")
    assert VGrid.directoryExists("/alice/sim/")
    assert VGrid.directoryExists("/alice")
    assert not VGrid.directoryExists("/alice/sim/run.jdl")
    assert not VGrid.directoryExists("/alice/other")

    assert VGrid.fileExists("/alice/sim/run.jdl")
    assert not VGrid.fileExists("/alice/sim/run")
    assert not VGrid.fileExists("/alice/sim/missing.jdl")


def test_vgrid_ensure_directory():
    with pytest.raises(AccEffMissingError, match="does not exist"):
        VGrid.ensureDirectory("/alice/sim", create=False)

    assert VGrid.ensureDirectory("/alice/sim", create=True) == "/alice/sim"
    assert VGrid.directoryExists("/alice/sim")


def test_vgrid_upload_creates_parents(tmp_path):
    local = tmp_path / "OCDB_sim.root"
    local.write_bytes(b"snapshot")

    VGrid.upload(local, "/alice/sim/OCDB/195682/OCDB_sim.root")

    assert VGrid._grid.files["/alice/sim/OCDB/195682/OCDB_sim.root"] == b"snapshot"


def test_vgrid_upload_missing_local_file(tmp_path):
    with pytest.raises(AccEffMissingError):
        VGrid.upload(tmp_path / "missing.C", "/alice/sim/missing.C")


def test_vgrid_copy_onto_directory_fails(tmp_path):
    local = tmp_path / "sim"
    local.write_text("")
    VGrid.mkdir("/alice/sim")

    with pytest.raises(AccEffError, match="Could not upload"):
        VGrid.upload(local, "/alice/sim")


def test_vgrid_remove(tmp_path):
    local = tmp_path / "sim.C"
    local.write_text("")
    VGrid.upload(local, "/alice/sim/sim.C")

    VGrid.remove("/alice/sim/sim.C")

    assert not VGrid.fileExists("/alice/sim/sim.C")
    with pytest.raises(AccEffError, match="Could not remove"):
        VGrid.remove("/alice/sim/sim.C")


def test_vgrid_submit_and_query(tmp_path):
    local = tmp_path / "run.jdl"
    local.write_text("")
    VGrid.upload(local, "/alice/sim/run.jdl")

    result = VGrid.submit("/alice/sim/run.jdl", ["195682", "2", "500"])
    job_id = result.getKey(0, "jobId")

    assert job_id == "1000"
    assert VGrid._grid.jobs[job_id].args == ["195682", "2", "500"]
    assert VGrid.queryJob(job_id).getKey(0, "status") == "WAITING"
    assert not VGrid.queryJob("1")


def test_vgrid_submit_failures(tmp_path):
    assert not VGrid.submit("/alice/sim/run.jdl", ["195682"])

    local = tmp_path / "run.jdl"
    local.write_text("")
    VGrid.upload(local, "/alice/sim/run.jdl")
    VGrid._grid.rejected_args.add("195682")

    assert not VGrid.submit("/alice/sim/run.jdl", ["195682", "1", "10"])
    assert VGrid.submit("/alice/sim/run.jdl", ["195683", "1", "10"])


def test_vgrid_find_collection(tmp_path):
    local = tmp_path / "root_archive.zip"
    local.write_bytes(b"")
    VGrid.upload(local, "/alice/sim/195682/001/root_archive.zip")

    text = VGrid.findCollection("/alice/sim/195682", "*root_archive.zip", "wn.xml")

    assert text.count("</event>") == 1
    assert '<collection name="wn.xml">' in text
