# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Multidimensional histogram with channel support for the Q-vector corrections.

Each dimension of the histogram corresponds to one of the variables of the
event classes, an extra dimension holds the channel number. Only the channels
used by the detector configuration are stored, consecutively, while the
caller always refers to the actual detector channel numbers.

Bins are addressed by a single integer: the position of the bin in the
flattened storage including the underflow and overflow bins of each variable.
"""

from collections.abc import Sequence

import hist
import numpy as np

from acceff_lib.core.error import AccEffError
from acceff_lib.core.logger import get_logger

from .variables import EventClassVariablesSet

logger = get_logger(__name__)


class ChannelizedHistogram:
    """
    Histogram over the event-class variables and the used detector channels.

    The histogram itself is created on request by `create` and appended to
    a list of histograms which is its actual owner.
    """

    def __init__(
        self, name: str, title: str, ecvs: EventClassVariablesSet, n_channels: int
    ):
        """
        Initialize the histogram description.

        Args:
            name (str): Name of the histogram.
            title (str): Title of the histogram.
            ecvs (EventClassVariablesSet): Variables defining the event classes.
            n_channels (int): Number of channels of the whole detector.
        """
        if n_channels <= 0:
            raise AccEffError(
                f"Histogram '{name}' needs a positive number of channels, not {n_channels}."
            )

        self.name = name
        self.title = title
        self._ecvs = ecvs
        self._n_channels = n_channels

        # detector channel number -> position on the channel axis
        self._channel_map: dict[int, int] = {}
        self._histogram: hist.Hist | None = None
        self._shape: tuple[int, ...] = ()

    def create(
        self, histogram_list: list[hist.Hist], used_channels: Sequence[bool]
    ) -> hist.Hist:
        """
        Create the histogram and append it to `histogram_list`.

        Args:
            histogram_list (list[hist.Hist]): List the new histogram is appended to.
            used_channels (Sequence[bool]): For each detector channel, whether it is used.

        Returns:
            hist.Hist: The new histogram.

        Raises:
            AccEffError: If the channel mask does not match the detector or no channel is used.
        """
        if len(used_channels) != self._n_channels:
            raise AccEffError(
                f"Histogram '{self.name}' expects {self._n_channels} channel flags, got {len(used_channels)}."
            )

        used = [ch for ch, flag in enumerate(used_channels) if flag]
        if not used:
            raise AccEffError(f"Histogram '{self.name}' has no used channel.")

        self._channel_map = {ch: i for i, ch in enumerate(used)}

        axes = [var.makeAxis() for var in self._ecvs]
        axes.append(
            hist.axis.Integer(
                0,
                len(used),
                name="channel",
                label="channel number",
                underflow=False,
                overflow=False,
            )
        )

        self._histogram = hist.Hist(
            *axes, storage=hist.storage.Weight(), name=self.name, label=self.title
        )
        self._shape = self._histogram.view(flow=True).shape
        histogram_list.append(self._histogram)

        logger.debug(
            f"Created histogram '{self.name}' with {len(used)} of {self._n_channels} channels."
        )
        return self._histogram

    def getHistogram(self) -> hist.Hist | None:
        return self._histogram

    def getBin(self, values: Sequence[float], channel: int | None = None) -> int:
        """
        Get the bin corresponding to the event variables and a detector channel.

        Args:
            values (Sequence[float]): Event variables, indexed by the variable ids.
            channel (int): Detector channel number.

        Raises:
            AccEffError: If no channel is given or the channel is not used.
        """
        histogram = self._requireHistogram()
        index = self._channelIndex(channel)

        indices = []
        for i, var in enumerate(self._ecvs):
            axis = histogram.axes[i]
            offset = 1 if axis.traits.underflow else 0
            indices.append(int(axis.index(values[var.id])) + offset)
        indices.append(index)

        return int(np.ravel_multi_index(tuple(indices), self._shape))

    def binContentValidated(self, bin: int) -> bool:
        """
        Whether the content of a bin can be used.

        Every existing bin of a channelized histogram is valid.
        """
        self._requireHistogram()
        return 0 <= bin < int(np.prod(self._shape))

    def getBinContent(self, bin: int) -> float:
        """Get the sum of the weights filled in a bin."""
        view = self._requireHistogram().view(flow=True)
        return float(view.value[self._unravel(bin)])

    def getBinError(self, bin: int) -> float:
        """Get the statistical error of a bin (square root of the sum of squared weights)."""
        view = self._requireHistogram().view(flow=True)
        return float(np.sqrt(view.variance[self._unravel(bin)]))

    def fill(
        self, values: Sequence[float], channel: int | None = None, weight: float = 1.0
    ) -> None:
        """
        Fill the histogram for the event variables and a detector channel.

        Raises:
            AccEffError: If no channel is given or the channel is not used.
        """
        histogram = self._requireHistogram()
        index = self._channelIndex(channel)
        histogram.fill(*(values[var.id] for var in self._ecvs), index, weight=weight)

    def _requireHistogram(self) -> hist.Hist:
        if self._histogram is None:
            raise AccEffError(f"Histogram '{self.name}' has not been created.")
        return self._histogram

    def _channelIndex(self, channel: int | None) -> int:
        if channel is None:
            raise AccEffError(
                f"Histogram '{self.name}' is channelized: a channel number is required."
            )
        if not 0 <= channel < self._n_channels:
            raise AccEffError(
                f"Channel {channel} is out of range for histogram '{self.name}' ({self._n_channels} channels)."
            )
        if channel not in self._channel_map:
            raise AccEffError(
                f"Channel {channel} is not used by histogram '{self.name}'."
            )
        return self._channel_map[channel]

    def _unravel(self, bin: int) -> tuple[int, ...]:
        if not self.binContentValidated(bin):
            raise AccEffError(f"Bin {bin} does not exist in histogram '{self.name}'.")
        return tuple(int(i) for i in np.unravel_index(bin, self._shape))
