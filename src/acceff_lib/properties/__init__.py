# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Value types describing a production: operating modes, software packages,
and the production settings.
"""

from .mode import Mode
from .packages import Packages
from .settings import SubmitterSettings

__all__ = ["Mode", "Packages", "SubmitterSettings"]
