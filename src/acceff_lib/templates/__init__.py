# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Instantiation of template files: variables and their substitution.
"""

from .variables import (
    DEFAULT_VARIABLES,
    VariableStore,
    find_variables,
    has_variables,
    replace_variables,
)

__all__ = [
    "DEFAULT_VARIABLES",
    "VariableStore",
    "find_variables",
    "has_variables",
    "replace_variables",
]
