# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import dataclass

from acceff_lib.core.error import AccEffError


@dataclass(frozen=True)
class ChunkPlan:
    """Splitting of the events of one run into jobs."""

    # Number of events requested for the run
    n_events: int

    # Number of chunks (jobs) of the run
    n_chunks: int

    # Number of events generated by each chunk
    events_per_chunk: int

    @property
    def generated_events(self) -> int:
        """Number of events actually generated for the run."""
        return self.n_chunks * self.events_per_chunk


def target_events(ratio: float, trigger_count: int) -> int:
    """Number of events to generate for a run with `trigger_count` reference triggers."""
    return round(ratio * trigger_count)


def plan_chunks(n_events: int, max_events_per_chunk: int) -> ChunkPlan:
    """
    Split `n_events` into the smallest number of chunks holding
    at most `max_events_per_chunk` events each.

    The number of events per chunk is rounded up, so that the chunks
    together generate at least `n_events` events.

    Raises:
        AccEffError: If the maximum is not positive or the number of events is negative.
    """
    if max_events_per_chunk <= 0:
        raise AccEffError(
            f"The maximum number of events per chunk must be positive, not {max_events_per_chunk}."
        )
    if n_events < 0:
        raise AccEffError(f"Cannot plan a negative number of events ({n_events}).")

    # integer ceiling divisions
    n_chunks = max(1, -(-n_events // max_events_per_chunk))
    return ChunkPlan(n_events, n_chunks, -(-n_events // n_chunks))
