# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import json
import shutil
import subprocess
from pathlib import Path

from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffConnectionError, AccEffError
from acceff_lib.core.logger import get_logger
from acceff_lib.grid.interface import GridInterface, GridMeta, GridResult, grid_backend

logger = get_logger(__name__)


@grid_backend
class AliEn(GridInterface, metaclass=GridMeta):
    """
    Implementation of GridInterface for the ALICE Grid (JAliEn),
    driven through the `alien.py` command-line client.
    """

    @staticmethod
    def envName() -> str:
        return "AliEn"

    @staticmethod
    def isAvailable() -> bool:
        return shutil.which(CFG.commands.alien) is not None

    @staticmethod
    def connect() -> None:
        if not AliEn.isAvailable():
            raise AccEffConnectionError(
                f"Cannot connect to the Grid: '{CFG.commands.alien}' is not available."
            )

        result = AliEn._run(["whoami"])
        if result.returncode != 0:
            raise AccEffConnectionError(
                f"Cannot connect to the Grid: {result.stderr.strip()}"
            )
        logger.debug(f"Connected to the Grid as '{result.stdout.strip()}'.")

    @staticmethod
    def ls(path: str, classify: bool = False) -> GridResult:
        args = ["ls", "-json"]
        if classify:
            args.append("-F")
        args.append(path)

        result = AliEn._run(args)
        if result.returncode != 0:
            # the path does not exist
            logger.debug(f"Listing of '{path}' failed: {result.stderr.strip()}")
            return GridResult()

        return AliEn._parseJson(result.stdout)

    @staticmethod
    def mkdir(path: str) -> None:
        result = AliEn._run(["mkdir", "-p", path])
        if result.returncode != 0:
            raise AccEffError(
                f"Could not create remote directory '{path}': {result.stderr.strip()}."
            )

    @staticmethod
    def copy(local: Path, remote: str) -> None:
        result = AliEn._run(["cp", "-f", f"file:{local}", f"alien:{remote}"])
        if result.returncode != 0:
            raise AccEffError(
                f"Could not copy '{local}' to '{remote}': {result.stderr.strip()}."
            )

    @staticmethod
    def remove(path: str) -> None:
        result = AliEn._run(["rm", path])
        if result.returncode != 0:
            raise AccEffError(
                f"Could not remove remote file '{path}': {result.stderr.strip()}."
            )

    @staticmethod
    def submit(jdl: str, args: list[str]) -> GridResult:
        result = AliEn._run(["submit", "-json", jdl, *args])
        if result.returncode != 0:
            logger.error(result.stdout.strip())
            logger.error(result.stderr.strip())
            return GridResult()

        return AliEn._parseJson(result.stdout)

    @staticmethod
    def queryJob(job_id: str) -> GridResult:
        result = AliEn._run(["ps", "-json", "-j", job_id])
        if result.returncode != 0:
            return GridResult()

        return AliEn._parseJson(result.stdout)

    @staticmethod
    def findCollection(directory: str, pattern: str, collection: str) -> str:
        result = AliEn._run(["find", "-x", collection, directory, pattern])
        if result.returncode != 0:
            raise AccEffError(
                f"Could not search for '{pattern}' in '{directory}': {result.stderr.strip()}."
            )
        return result.stdout

    @staticmethod
    def _run(args: list[str]) -> subprocess.CompletedProcess[str]:
        """
        Run the Grid client with the given arguments.

        Raises:
            AccEffConnectionError: If the client cannot be executed.
        """
        command = [CFG.commands.alien, *args]
        logger.debug(" ".join(command))

        try:
            return subprocess.run(
                command,
                text=True,
                check=False,
                capture_output=True,
                errors="replace",
            )
        except OSError as e:
            raise AccEffConnectionError(
                f"Could not execute '{CFG.commands.alien}': {e}."
            ) from e

    @staticmethod
    def _parseJson(output: str) -> GridResult:
        """
        Parse the JSON output of the Grid client.
        """
        try:
            return GridResult.fromJson(json.loads(output))
        except json.JSONDecodeError:
            logger.debug(f"Could not decode Grid output as JSON: {output!r}")
            return GridResult()
