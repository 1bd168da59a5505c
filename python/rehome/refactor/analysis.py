"""
Per-file analysis: snapshot, classify, resolve.

Each file is read exactly once. The bytes read here are the snapshot the
plan is computed against and that the applier later verifies before
writing.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rehome.identifier import RenameRequest
from rehome.refactor.classifier import classify
from rehome.refactor.lexical import SourceText
from rehome.refactor.scope import FileImportContext, build_import_context, resolve
from rehome.refactor.types import Binding, Occurrence, SkipReason
from rehome.search.types import RawMatch

logger = logging.getLogger("rehome.analysis")

# Kotlin block comments nest
NESTED_COMMENT_EXTENSIONS = frozenset({".kt", ".kts"})


@dataclass
class FileAnalysis:
    file: Path
    occurrences: list[Occurrence] = field(default_factory=list)
    snapshot: Optional[bytes] = None
    source: Optional[SourceText] = None
    context: Optional[FileImportContext] = None
    skip_reason: Optional[SkipReason] = None
    skip_detail: str = ""

    @property
    def has_ambiguity(self) -> bool:
        return any(o.binding is Binding.AMBIGUOUS for o in self.occurrences)

    @property
    def bound(self) -> list[Occurrence]:
        return [o for o in self.occurrences if o.bound_to_target]


def _matches_snapshot(matches: list[RawMatch], source: SourceText) -> bool:
    for m in matches:
        if m.line > len(source.lines) or source.line_text(m.line) != m.line_text:
            return False
    return True


def analyze_file(file: Path, matches: list[RawMatch], request: RenameRequest) -> FileAnalysis:
    """
    Read, classify and scope-resolve every match in one file.

    Files that cannot be decoded, or whose content no longer agrees with the
    search results, come back with a skip reason and unresolved occurrences.
    """
    try:
        snapshot = file.read_bytes()
        content = snapshot.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read {file}: {e}")
        return FileAnalysis(
            file=file,
            occurrences=[classify(m, request.source) for m in matches],
            skip_reason=SkipReason.UNREADABLE,
            skip_detail=str(e),
        )

    source = SourceText(content, nested_comments=file.suffix.lower() in NESTED_COMMENT_EXTENSIONS)

    if not _matches_snapshot(matches, source):
        logger.warning(f"{file} changed while scanning")
        return FileAnalysis(
            file=file,
            occurrences=[classify(m, request.source) for m in matches],
            snapshot=snapshot,
            skip_reason=SkipReason.CHANGED_DURING_SCAN,
            skip_detail="file content no longer matches search results",
        )

    ctx = build_import_context(source)
    occurrences = [resolve(classify(m, request.source, source), ctx, request) for m in matches]

    return FileAnalysis(
        file=file,
        occurrences=occurrences,
        snapshot=snapshot,
        source=source,
        context=ctx,
    )
