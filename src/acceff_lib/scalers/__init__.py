# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Run lists and per-run trigger scaler counts used to size the productions.
"""

from .interface import ScalersInterface
from .scalers import StaticScalers, YamlScalers, make_scalers, read_run_list

__all__ = [
    "ScalersInterface",
    "StaticScalers",
    "YamlScalers",
    "make_scalers",
    "read_run_list",
]
