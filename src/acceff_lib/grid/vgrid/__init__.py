# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from .vgrid import VGrid

__all__ = ["VGrid"]
