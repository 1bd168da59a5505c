"""
Core data model for the rename engine.

Occurrences are immutable: each pipeline stage returns new instances
(dataclasses.replace) instead of mutating the scan snapshot.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

from rehome.identifier import RenameRequest


class Role(Enum):
    """Syntactic role of an occurrence."""

    IMPORT = "import"
    PACKAGE_DECL = "package_decl"
    DECLARATION_SITE = "declaration_site"
    QUALIFIED_USAGE = "qualified_usage"
    SIMPLE_NAME_USAGE = "simple_name_usage"


class Binding(Enum):
    """Whether an occurrence refers to the rename source."""

    BOUND = "bound"
    NOT_BOUND = "not_bound"
    AMBIGUOUS = "ambiguous"


class SkipReason(Enum):
    """Why a file was left out of the commit."""

    IMPORT_CONFLICT = "ImportConflict"
    SCOPE_AMBIGUOUS = "ScopeAmbiguous"
    DECLARATION_CONFLICT = "DeclarationConflict"
    RELOCATION_CONFLICT = "RelocationConflict"
    SHARED_DECLARATION_FILE = "SharedDeclarationFile"
    UNREADABLE = "Unreadable"
    CHANGED_DURING_SCAN = "ChangedDuringScan"
    REJECTED = "Rejected"


class Disposition(Enum):
    """Final fate of a scanned occurrence."""

    REWRITE = "rewrite"  # Edited (or would be, in a dry run)
    SKIPPED = "skipped"  # Bound, but its file was skipped
    IRRELEVANT = "irrelevant"  # Not bound to the source


@dataclass(frozen=True)
class Occurrence:
    """A classified (and, after scope resolution, bound) match."""

    file: Path
    line: int
    start: int
    end: int
    raw_text: str
    line_text: str
    role: Role
    # Dotted qualifier directly before a simple-name match ("" if none)
    qualifier: str = ""
    # Match lies inside a comment or string literal
    in_literal: bool = False
    binding: Optional[Binding] = None
    reason: str = ""

    @property
    def bound_to_target(self) -> bool:
        return self.binding is Binding.BOUND

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}:{self.start + 1}"


@dataclass(frozen=True)
class TextEdit:
    """Replace columns [start, end) of a 1-based line. start == end inserts."""

    line: int
    start: int
    end: int
    replacement: str
    kind: str = ""

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.line, self.start, self.end)


@dataclass(frozen=True)
class LineDiff:
    """One changed line for review: old text -> new text."""

    line: int
    old: str
    new: str
    removed: bool = False


@dataclass
class FilePlan:
    """
    Planned edits for one file (the EditPlan).

    ``edits`` are non-overlapping and stored in descending (line, column)
    order, the order they are applied in. ``snapshot`` is the exact file
    content the plan was computed against.
    """

    file: Path
    edits: list[TextEdit] = field(default_factory=list)
    relocate_to: Optional[Path] = None
    skip_reason: Optional[SkipReason] = None
    skip_detail: str = ""
    occurrences: list[Occurrence] = field(default_factory=list)
    diff: list[LineDiff] = field(default_factory=list)
    snapshot: Optional[bytes] = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None

    @property
    def has_changes(self) -> bool:
        return bool(self.edits) or self.relocate_to is not None

    def skip(self, reason: SkipReason, detail: str = "") -> "FilePlan":
        self.skip_reason = reason
        self.skip_detail = detail
        return self


class SkippedFile(NamedTuple):
    path: str
    reason: SkipReason
    detail: str = ""


@dataclass(frozen=True)
class OccurrenceOutcome:
    """Report line for one scanned occurrence."""

    occurrence: Occurrence
    disposition: Disposition
    reason: str = ""


@dataclass
class CommitResult:
    """Aggregate result of a rename operation."""

    request: RenameRequest
    files_changed: int = 0
    files_skipped: list[SkippedFile] = field(default_factory=list)
    relocations: list[tuple[str, str]] = field(default_factory=list)
    dry_run: bool = False
    plans: list[FilePlan] = field(default_factory=list)
    outcomes: list[OccurrenceOutcome] = field(default_factory=list)

    @property
    def total_occurrences(self) -> int:
        return len(self.outcomes)

    def count(self, disposition: Disposition) -> int:
        return sum(1 for o in self.outcomes if o.disposition is disposition)
