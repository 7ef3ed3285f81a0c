# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Merging of the AODs produced by a production.

This module defines the `Merger` class, which builds the collections of files
to merge for each run and submits the intermediate or final merging jobs.
"""

from .merger import Merger

__all__ = [
    "Merger",
]
