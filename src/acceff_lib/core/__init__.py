# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core utilities shared by all acceff components.

Provides the configuration system, logging, the exception hierarchy,
the per-run `Repeater`, click formatting helpers, and generic utilities.
"""
