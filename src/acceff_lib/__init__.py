# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core implementation of the acceff command-line tool.

This package provides the internal logic behind acceff's production workflow.
It defines the template variables and their substitution, the generation of
JDL files, the abstractions for Grid backends (AliEn and an in-memory virtual
Grid), the run lists and trigger scalers, the submitter orchestrating a
production and the merger of its outputs. It also provides a channelized
histogram used by the flow-vector corrections. All acceff CLI commands
ultimately delegate to the functionality implemented here.
"""

from .acceff import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "check",
    "clean",
    "core",
    "grid",
    "histograms",
    "jdl",
    "merge",
    "properties",
    "scalers",
    "show",
    "status",
    "submit",
    "templates",
]
