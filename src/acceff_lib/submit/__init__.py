# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Utilities for preparing and submitting acceptance x efficiency productions.

`Submitter` instantiates the template files of a production, makes the OCDB
snapshots of its runs, uploads everything to the Grid and submits one master
job per run. The number of events of a run is split into chunks by the
planner (`plan_chunks`), and the outcome of a submission is collected
in a `SubmissionReport`.

`SubmitterFactory` combines a settings file with the command-line options
and selects the Grid backend, producing a validated `Submitter`.
`SubmitterPresenter` renders the configuration and the submission report.
"""

from .factory import SubmitterFactory
from .planner import ChunkPlan, plan_chunks, target_events
from .presenter import SubmitterPresenter
from .report import RunSubmission, SubmissionReport
from .submitter import Submitter

__all__ = [
    "ChunkPlan",
    "RunSubmission",
    "SubmissionReport",
    "Submitter",
    "SubmitterFactory",
    "SubmitterPresenter",
    "plan_chunks",
    "target_events",
]
