# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Grid support for acceff.

This module groups the components that allow acceff to interact with the
remote Grid storage and job queue: the abstract interface and the concrete
backends (AliEn through `alien.py`, and an in-memory virtual Grid).
"""

# import so that these backends are registered but do not export them from here
from .alien import AliEn as _AliEn
from .vgrid import VGrid as _VGrid

_AliEn, _VGrid
