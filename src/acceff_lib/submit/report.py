# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import dataclass, field
from typing import Self

from acceff_lib.core.repeater import Repeater

from .planner import ChunkPlan


@dataclass
class RunSubmission:
    """Outcome of the submission of the jobs of a single run."""

    # Run number
    run: int

    # Splitting of the run into chunks (None for merging jobs)
    plan: ChunkPlan | None = None

    # Identifier of the master job (None for dry runs)
    job_id: str | None = None

    # Grid command issued (or that would have been issued)
    command: str = ""


@dataclass
class SubmissionReport:
    """
    Outcome of the submission of a whole production (or of a merging stage).

    Runs that failed are listed in `failures` together with the reason,
    runs that needed no job in `skipped`, the other runs are in `submissions`.
    """

    dry_run: bool = False
    submissions: list[RunSubmission] = field(default_factory=list)
    failures: dict[int, str] = field(default_factory=dict)

    # runs with nothing to do
    skipped: list[int] = field(default_factory=list)

    @property
    def n_jobs(self) -> int:
        """Number of (chunk) jobs submitted."""
        return sum(s.plan.n_chunks if s.plan else 1 for s in self.submissions)

    @property
    def n_events(self) -> int:
        """Number of events that will be generated."""
        return sum(s.plan.generated_events for s in self.submissions if s.plan)

    @property
    def failed_runs(self) -> list[int]:
        return list(self.failures)

    @property
    def success(self) -> bool:
        """Whether at least one run was processed and none failed."""
        return bool(self.submissions or self.skipped) and not self.failures

    @classmethod
    def fromRepeater(cls, repeater: Repeater, dry_run: bool = False) -> Self:
        """
        Build a report from a Repeater that iterated over runs and returned
        a RunSubmission for each submitted run or None for a skipped run.
        """
        return cls(
            dry_run=dry_run,
            submissions=[
                repeater.results[i]
                for i in sorted(repeater.results)
                if repeater.results[i] is not None
            ],
            skipped=[
                repeater.items[i]
                for i in sorted(repeater.results)
                if repeater.results[i] is None
            ],
            failures={
                repeater.items[i]: str(e)
                for i, e in sorted(repeater.encountered_errors.items())
            },
        )
