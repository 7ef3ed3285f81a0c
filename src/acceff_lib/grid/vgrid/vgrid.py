# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from pathlib import Path

from acceff_lib.core.error import AccEffConnectionError, AccEffError
from acceff_lib.grid.interface import GridInterface, GridMeta, GridResult, grid_backend

from .system import VGridError, VirtualGridSystem, make_xml_collection


@grid_backend
class VGrid(GridInterface, metaclass=GridMeta):
    """
    Implementation of GridInterface for the in-memory Virtual Grid.
    """

    _grid = VirtualGridSystem()

    @staticmethod
    def envName() -> str:
        return "VGrid"

    @staticmethod
    def isAvailable() -> bool:
        # always available
        return True

    @staticmethod
    def connect() -> None:
        if not VGrid._grid.connected:
            raise AccEffConnectionError("Cannot connect to the virtual Grid.")

    @staticmethod
    def ls(path: str, classify: bool = False) -> GridResult:
        return GridResult(
            [{"name": name} for name in VGrid._grid.listPath(path, classify)]
        )

    @staticmethod
    def mkdir(path: str) -> None:
        try:
            VGrid._grid.makeDir(path)
        except VGridError as e:
            raise AccEffError(f"Could not create remote directory '{path}': {e}") from e

    @staticmethod
    def copy(local: Path, remote: str) -> None:
        try:
            VGrid._grid.writeFile(remote, local.read_bytes())
        except (OSError, VGridError) as e:
            raise AccEffError(f"Could not copy '{local}' to '{remote}': {e}") from e

    @staticmethod
    def remove(path: str) -> None:
        try:
            VGrid._grid.removeFile(path)
        except VGridError as e:
            raise AccEffError(f"Could not remove remote file '{path}': {e}") from e

    @staticmethod
    def submit(jdl: str, args: list[str]) -> GridResult:
        try:
            job_id = VGrid._grid.submitJob(jdl, args)
        except VGridError:
            return GridResult()
        return GridResult([{"jobId": job_id}])

    @staticmethod
    def queryJob(job_id: str) -> GridResult:
        if not (job := VGrid._grid.jobs.get(job_id)):
            return GridResult()
        return GridResult(
            [{"id": job.job_id, "status": job.status, "name": job.jdl}]
        )

    @staticmethod
    def findCollection(directory: str, pattern: str, collection: str) -> str:
        return make_xml_collection(
            collection, VGrid._grid.findFiles(directory, pattern)
        )
