"""
Rename resolution and rewrite engine.

Pipeline: scanner -> classifier -> scope resolver -> planner -> applier, all
over one immutable snapshot of the scan. Nothing touches the filesystem
before the applier's commit phase.
"""

from rehome.refactor.engine import run_rename
from rehome.refactor.types import (
    Binding,
    CommitResult,
    Disposition,
    FilePlan,
    Occurrence,
    OccurrenceOutcome,
    Role,
    SkipReason,
    TextEdit,
)

__all__ = [
    "Binding",
    "CommitResult",
    "Disposition",
    "FilePlan",
    "Occurrence",
    "OccurrenceOutcome",
    "Role",
    "SkipReason",
    "TextEdit",
    "run_rename",
]
