# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Histograms used by the Q-vector flow corrections.

`EventClassVariable` and `EventClassVariablesSet` describe the binning of
the event classes. `ChannelizedHistogram` adds a channel dimension on top
of them, storing only the channels used by a detector configuration.
"""

from .channelized import ChannelizedHistogram
from .variables import EventClassVariable, EventClassVariablesSet

__all__ = [
    "ChannelizedHistogram",
    "EventClassVariable",
    "EventClassVariablesSet",
]
