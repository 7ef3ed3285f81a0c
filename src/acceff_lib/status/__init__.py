# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Inspection of the state of submitted Grid jobs.
"""
