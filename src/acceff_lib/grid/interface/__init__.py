# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Abstractions for the remote Grid storage and job queue.

- `GridInterface`: the abstract interface every Grid backend implements
  (listing, directory creation, copy, removal, job submission and query,
  collection building), together with higher-level existence checks and uploads.

- `GridResult`: the key/value entries returned by Grid commands.

- `GridMeta`: a metaclass that registers the available backends and selects
  one by name, environment variable, or configured default. The
  `@grid_backend` decorator registers implementations.
"""

from .interface import GridInterface
from .meta import GridMeta, grid_backend
from .result import GridResult

__all__ = ["GridInterface", "GridMeta", "GridResult", "grid_backend"]
