# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from abc import ABC
from pathlib import Path

from acceff_lib.core.common import grid_basename, grid_dirname
from acceff_lib.core.error import AccEffError, AccEffMissingError
from acceff_lib.core.logger import get_logger

from .result import GridResult

logger = get_logger(__name__)


class GridInterface(ABC):
    """
    Abstract base class for Grid service integrations.

    Concrete Grid classes must implement the static methods to allow
    acceff to list, create and copy remote files and to submit jobs
    in a uniform way. The class methods build higher-level operations
    on top of them.

    All functions should raise AccEffError when encountering an error.
    """

    @staticmethod
    def envName() -> str:
        """
        Return the name of the Grid backend.
        """
        raise NotImplementedError(
            "envName method is not implemented for this Grid implementation"
        )

    @staticmethod
    def isAvailable() -> bool:
        """
        Determine whether the Grid client is available on the current host.
        """
        raise NotImplementedError(
            "isAvailable method is not implemented for this Grid implementation"
        )

    @staticmethod
    def connect() -> None:
        """
        Check that the Grid service can be reached with valid credentials.

        Raises:
            AccEffConnectionError: If the service cannot be reached.
        """
        raise NotImplementedError(
            "connect method is not implemented for this Grid implementation"
        )

    @staticmethod
    def ls(path: str, classify: bool = False) -> GridResult:
        """
        List a remote path.

        Args:
            path (str): Remote file or directory.
            classify (bool): Append '/' to the names of directories.

        Returns:
            GridResult: One entry with a 'name' key per listed item.
                Empty if the path does not exist.
        """
        raise NotImplementedError(
            "ls method is not implemented for this Grid implementation"
        )

    @staticmethod
    def mkdir(path: str) -> None:
        """
        Create a remote directory including its missing parents.

        Raises:
            AccEffError: If the directory could not be created.
        """
        raise NotImplementedError(
            "mkdir method is not implemented for this Grid implementation"
        )

    @staticmethod
    def copy(local: Path, remote: str) -> None:
        """
        Copy a local file to a remote location, overwriting it.

        Raises:
            AccEffError: If the file could not be copied.
        """
        raise NotImplementedError(
            "copy method is not implemented for this Grid implementation"
        )

    @staticmethod
    def remove(path: str) -> None:
        """
        Remove a remote file.

        Raises:
            AccEffError: If the file could not be removed.
        """
        raise NotImplementedError(
            "remove method is not implemented for this Grid implementation"
        )

    @staticmethod
    def submit(jdl: str, args: list[str]) -> GridResult:
        """
        Submit a remote JDL with the given arguments.

        Returns:
            GridResult: Result whose first entry contains the 'jobId' key
                if the submission succeeded. Empty if the submission failed.
        """
        raise NotImplementedError(
            "submit method is not implemented for this Grid implementation"
        )

    @staticmethod
    def queryJob(job_id: str) -> GridResult:
        """
        Get information about a Grid job.

        Returns:
            GridResult: Entry describing the job (including its 'status'). Empty if unknown.
        """
        raise NotImplementedError(
            "queryJob method is not implemented for this Grid implementation"
        )

    @staticmethod
    def findCollection(directory: str, pattern: str, collection: str) -> str:
        """
        Find the files matching `pattern` below `directory` and return them
        as an XML collection named `collection`.

        Returns:
            str: Text of the XML collection. Contains no event if nothing matched.
        """
        raise NotImplementedError(
            "findCollection method is not implemented for this Grid implementation"
        )

    @classmethod
    def directoryExists(cls, path: str) -> bool:
        """
        Check whether a remote directory exists.

        Lists the parent directory and looks for an entry named exactly
        like the directory followed by a slash.
        """
        name = grid_basename(path)
        if not name:
            return False

        entries = cls.ls(grid_dirname(path) or "/", classify=True)
        return f"{name}/" in entries.names()

    @classmethod
    def fileExists(cls, lfn: str) -> bool:
        """
        Check whether a remote file exists.

        Lists the file and checks that the returned entry has exactly its name.
        """
        name = grid_basename(lfn)
        if not name:
            return False

        return name in cls.ls(lfn).names()

    @classmethod
    def ensureDirectory(cls, path: str, create: bool) -> str:
        """
        Make sure a remote directory exists, creating it if requested.

        Returns:
            str: The path to the directory.

        Raises:
            AccEffMissingError: If the directory does not exist and `create` is False.
            AccEffError: If the directory could not be created.
        """
        if cls.directoryExists(path):
            return path

        if not create:
            raise AccEffMissingError(f"Remote directory '{path}' does not exist.")

        logger.info(f"Remote directory '{path}' does not exist. Trying to create it.")
        cls.mkdir(path)
        return path

    @classmethod
    def upload(cls, local: Path, remote: str) -> None:
        """
        Copy a local file to the Grid, creating the missing parent directories.

        Raises:
            AccEffMissingError: If the local file does not exist.
            AccEffError: If the file could not be copied.
        """
        if not local.is_file():
            raise AccEffMissingError(f"Local file '{local}' does not exist.")

        parent = grid_dirname(remote)
        if parent and not cls.directoryExists(parent):
            cls.mkdir(parent)

        logger.debug(f"cp {local} {remote}")
        try:
            cls.copy(local, remote)
        except AccEffError as e:
            raise AccEffError(f"Could not upload '{local}' to '{remote}': {e}") from e
