# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import pytest

from acceff_lib.core.error import AccEffError
from acceff_lib.submit import ChunkPlan, plan_chunks, target_events


@pytest.mark.parametrize(
    "n_events,maximum,n_chunks,per_chunk",
    [
        (1000, 600, 2, 500),
        (1600, 600, 3, 534),
        (1200, 600, 2, 600),
        (1, 600, 1, 1),
        (600, 600, 1, 600),
        (601, 600, 2, 301),
        (0, 600, 1, 0),
    ],
)
def test_plan_chunks(n_events, maximum, n_chunks, per_chunk):
    plan = plan_chunks(n_events, maximum)

    assert plan == ChunkPlan(n_events, n_chunks, per_chunk)
    assert plan.events_per_chunk <= maximum
    assert plan.generated_events >= n_events


def test_plan_chunks_generated_events():
    assert plan_chunks(1600, 600).generated_events == 1602


@pytest.mark.parametrize("maximum", [0, -5])
def test_plan_chunks_invalid_maximum(maximum):
    with pytest.raises(AccEffError, match="must be positive"):
        plan_chunks(1000, maximum)


def test_plan_chunks_negative_events():
    with pytest.raises(AccEffError, match="negative number of events"):
        plan_chunks(-1, 600)


@pytest.mark.parametrize(
    "ratio,count,expected",
    [(2.0, 500, 1000), (2.0, 800, 1600), (0.5, 3, 2), (1.5, 3, 4), (0.1, 1234, 123)],
)
def test_target_events(ratio, count, expected):
    assert target_events(ratio, count) == expected
