# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import fnmatch
import posixpath
from dataclasses import dataclass, field


class VGridError(Exception):
    """Common exception type for Virtual Grid errors."""

    pass


@dataclass
class VirtualJob:
    job_id: str
    jdl: str
    args: list[str] = field(default_factory=list)
    status: str = "WAITING"


class VirtualGridSystem:
    """
    A virtual Grid for testing purposes.
    Directories and files are kept in memory, jobs are only recorded.
    """

    def __init__(self):
        """Initialize the Virtual Grid instance."""
        self.connected = True
        self.directories: set[str] = {"/"}
        self.files: dict[str, bytes] = {}
        self.jobs: dict[str, VirtualJob] = {}
        # submissions with any of these arguments are rejected
        self.rejected_args: set[str] = set()
        self._next_job_id = 1000

    def reset(self):
        """Remove all directories, files and jobs."""
        self.__init__()

    def makeDir(self, path: str):
        """Create a directory including its parents."""
        path = self._normalize(path)
        while path not in self.directories:
            if path in self.files:
                raise VGridError(f"'{path}' is a file.")
            self.directories.add(path)
            path = posixpath.dirname(path)

    def writeFile(self, path: str, content: bytes):
        """Write a file. The parent directory must exist."""
        path = self._normalize(path)
        if posixpath.dirname(path) not in self.directories:
            raise VGridError(f"Directory of '{path}' does not exist.")
        if path in self.directories:
            raise VGridError(f"'{path}' is a directory.")
        self.files[path] = content

    def removeFile(self, path: str):
        """Remove a file."""
        path = self._normalize(path)
        if path not in self.files:
            raise VGridError(f"File '{path}' does not exist.")
        del self.files[path]

    def listPath(self, path: str, classify: bool) -> list[str]:
        """
        List the names below a directory or the name of a file.
        Returns an empty list for a missing path.
        """
        path = self._normalize(path)
        if path in self.files:
            return [posixpath.basename(path)]
        if path not in self.directories:
            return []

        names = []
        for d in sorted(self.directories):
            if d != path and posixpath.dirname(d) == path:
                names.append(posixpath.basename(d) + ("/" if classify else ""))
        for f in sorted(self.files):
            if posixpath.dirname(f) == path:
                names.append(posixpath.basename(f))
        return names

    def findFiles(self, directory: str, pattern: str) -> list[str]:
        """Find all files below a directory whose relative path matches the pattern."""
        directory = self._normalize(directory)
        prefix = directory.rstrip("/") + "/"
        return [
            f
            for f in sorted(self.files)
            if f.startswith(prefix) and fnmatch.fnmatch(f[len(prefix) :], pattern)
        ]

    def submitJob(self, jdl: str, args: list[str]) -> str:
        """Register a new job. The JDL must exist."""
        jdl = self._normalize(jdl)
        if jdl not in self.files:
            raise VGridError(f"JDL '{jdl}' does not exist.")
        if self.rejected_args.intersection(args):
            raise VGridError(f"Submission of '{jdl}' with arguments {args} rejected.")

        job_id = str(self._next_job_id)
        self._next_job_id += 1
        self.jobs[job_id] = VirtualJob(job_id, jdl, list(args))
        return job_id

    @staticmethod
    def _normalize(path: str) -> str:
        return posixpath.normpath("/" + path.strip().lstrip("/"))


def make_xml_collection(name: str, lfns: list[str]) -> str:
    """Build an XML collection in the format produced by the Grid 'find -x' command."""
    lines = ['<?xml version="1.0"?>', "<alien>", f'  <collection name="{name}">']
    for i, lfn in enumerate(lfns, start=1):
        lines.append(f'    <event name="{i}">')
        lines.append(
            f'      <file name="{posixpath.basename(lfn)}" lfn="{lfn}" turl="alien://{lfn}" />'
        )
        lines.append("    </event>")
    lines.append("  </collection>")
    lines.append("</alien>")
    return "\n".join(lines) + "\n"
