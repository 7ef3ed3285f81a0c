# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import math

import hist
import pytest

from acceff_lib.core.error import AccEffError
from acceff_lib.histograms import (
    ChannelizedHistogram,
    EventClassVariable,
    EventClassVariablesSet,
)

USED = [True, False, True, True, False, False, False, True]


@pytest.fixture
def ecvs():
    return EventClassVariablesSet(
        [
            EventClassVariable(0, "centrality", "centrality (%)", 10, 0.0, 100.0),
            EventClassVariable(1, "vz", "v_{z} (cm)", 4, -10.0, 10.0, (-10.0, -5.0, 0.0, 5.0, 10.0)),
        ]
    )


@pytest.fixture
def histogram(ecvs):
    h = ChannelizedHistogram("QnCorrectionsV0", "V0 multiplicity", ecvs, 8)
    h.create([], USED)
    return h


def test_event_class_variable_regular_axis():
    axis = EventClassVariable(0, "centrality", "centrality (%)", 10, 0.0, 100.0).makeAxis()

    assert isinstance(axis, hist.axis.Regular)
    assert axis.size == 10
    assert axis.name == "centrality"


def test_event_class_variable_variable_axis():
    axis = EventClassVariable(1, "vz", "v_{z}", 2, -10.0, 10.0, (-10.0, 0.0, 10.0)).makeAxis()

    assert isinstance(axis, hist.axis.Variable)
    assert list(axis.edges) == [-10.0, 0.0, 10.0]


@pytest.mark.parametrize(
    "nbins,low,high,edges",
    [(0, 0.0, 1.0, None), (10, 1.0, 1.0, None), (2, 0.0, 1.0, (0.0, 1.0))],
)
def test_event_class_variable_invalid_binning(nbins, low, high, edges):
    with pytest.raises(AccEffError):
        EventClassVariable(0, "x", "x", nbins, low, high, edges)


def test_event_class_variables_set_rejects_duplicates(ecvs):
    with pytest.raises(AccEffError, match="already in the set"):
        ecvs.add(EventClassVariable(2, "vz", "v_{z}", 1, 0.0, 1.0))

    assert len(ecvs) == 2
    assert ecvs[1].name == "vz"
    assert [v.id for v in ecvs] == [0, 1]


def test_channelized_histogram_invalid_channels(ecvs):
    with pytest.raises(AccEffError, match="positive number of channels"):
        ChannelizedHistogram("h", "h", ecvs, 0)


def test_channelized_histogram_create(ecvs):
    histograms = []
    h = ChannelizedHistogram("QnCorrectionsV0", "V0 multiplicity", ecvs, 8)

    created = h.create(histograms, USED)

    assert histograms == [created]
    assert h.getHistogram() is created
    assert created.name == "QnCorrectionsV0"
    assert created.axes[2].name == "channel"
    # only the used channels are stored
    assert created.axes[2].size == 4
    assert created.view(flow=True).shape == (12, 6, 4)


def test_channelized_histogram_create_invalid_mask(ecvs):
    h = ChannelizedHistogram("h", "h", ecvs, 8)

    with pytest.raises(AccEffError, match="expects 8 channel flags, got 3"):
        h.create([], [True, True, True])
    with pytest.raises(AccEffError, match="no used channel"):
        h.create([], [False] * 8)


def test_channelized_histogram_not_created(ecvs):
    h = ChannelizedHistogram("h", "h", ecvs, 8)

    with pytest.raises(AccEffError, match="has not been created"):
        h.fill([50.0, 0.0], 0)
    with pytest.raises(AccEffError, match="has not been created"):
        h.getBin([50.0, 0.0], 0)


def test_channelized_histogram_get_bin(histogram):
    # centrality bin 1 and vz bin 2 shifted by the underflow bins, channel 3 stored third
    assert histogram.getBin([15.0, 2.5], 3) == 2 * 24 + 3 * 4 + 2
    assert histogram.getBin([15.0, 2.5], 0) == 2 * 24 + 3 * 4 + 0
    assert histogram.getBin([15.0, 2.5], 7) == 2 * 24 + 3 * 4 + 3


def test_channelized_histogram_get_bin_flow(histogram):
    assert histogram.getBin([-5.0, 2.5], 0) == 0 * 24 + 3 * 4
    assert histogram.getBin([150.0, 2.5], 0) == 11 * 24 + 3 * 4


@pytest.mark.parametrize(
    "channel,message",
    [
        (None, "a channel number is required"),
        (8, "out of range"),
        (-1, "out of range"),
        (1, "is not used"),
    ],
)
def test_channelized_histogram_invalid_channel(histogram, channel, message):
    with pytest.raises(AccEffError, match=message):
        histogram.getBin([15.0, 2.5], channel)
    with pytest.raises(AccEffError, match=message):
        histogram.fill([15.0, 2.5], channel)


def test_channelized_histogram_fill_content_and_error(histogram):
    histogram.fill([15.0, 2.5], 3, weight=2.0)
    histogram.fill([17.0, 4.0], 3, weight=2.0)
    histogram.fill([15.0, 2.5], 0)

    bin = histogram.getBin([15.0, 2.5], 3)
    assert histogram.getBinContent(bin) == pytest.approx(4.0)
    assert histogram.getBinError(bin) == pytest.approx(math.sqrt(8.0))
    assert histogram.getBinContent(histogram.getBin([15.0, 2.5], 0)) == pytest.approx(1.0)
    assert histogram.getBinContent(histogram.getBin([15.0, 2.5], 2)) == 0.0


def test_channelized_histogram_fill_overflow(histogram):
    histogram.fill([150.0, 2.5], 7)

    assert histogram.getBinContent(histogram.getBin([150.0, 2.5], 7)) == pytest.approx(1.0)
    assert histogram.getHistogram().sum(flow=False).value == 0.0


def test_channelized_histogram_bin_validation(histogram):
    n_bins = 12 * 6 * 4

    assert histogram.binContentValidated(0)
    assert histogram.binContentValidated(n_bins - 1)
    assert not histogram.binContentValidated(n_bins)
    assert not histogram.binContentValidated(-1)
    with pytest.raises(AccEffError, match=f"Bin {n_bins} does not exist"):
        histogram.getBinContent(n_bins)
