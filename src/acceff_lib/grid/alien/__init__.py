# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from .alien import AliEn

__all__ = ["AliEn"]
