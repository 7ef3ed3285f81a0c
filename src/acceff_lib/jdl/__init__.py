# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Writing of JDL (Job Description Language) files understood by the Grid job queue.
"""

from .generator import (
    generate_merge_jdl,
    generate_run_jdl,
    is_final_merge_jdl,
    is_jdl,
)
from .writer import JDLWriter

__all__ = [
    "JDLWriter",
    "generate_merge_jdl",
    "generate_run_jdl",
    "is_final_merge_jdl",
    "is_jdl",
]
