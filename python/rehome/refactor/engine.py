"""
Rename entry point: run_rename.

Control flow: validate -> scan -> analyse (classify + resolve, per file,
concurrently) -> plan -> review -> commit. Everything up to the commit works
on one read-only snapshot; the commit runs under the root lock.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from pathlib import Path
from typing import Optional, Union

from rehome.config import RenameOptions
from rehome.errors import InvalidRoot, RehomeError
from rehome.events import EventKind, EventLog
from rehome.identifier import RenameRequest
from rehome.ignore_patterns import load_all_ignores
from rehome.refactor.analysis import FileAnalysis, analyze_file
from rehome.refactor.applier import apply_plans
from rehome.refactor.cancel import CancelToken
from rehome.refactor.lock import RootLock
from rehome.refactor.planner import plan_file
from rehome.refactor.review import AcceptAll, ReviewDecision, Reviewer
from rehome.refactor.scanner import scan
from rehome.refactor.types import (
    Binding,
    CommitResult,
    Disposition,
    FilePlan,
    OccurrenceOutcome,
    SkippedFile,
    SkipReason,
)
from rehome.search import get_provider
from rehome.search.types import RawMatch, SearchProvider, SearchScope

logger = logging.getLogger("rehome.engine")


async def _analyze_all(
    matches: list[RawMatch],
    request: RenameRequest,
    max_concurrency: int,
) -> list[FileAnalysis]:
    by_file: dict[Path, list[RawMatch]] = defaultdict(list)
    for m in matches:
        by_file[m.file].append(m)

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _bounded(file: Path, file_matches: list[RawMatch]) -> FileAnalysis:
        async with semaphore:
            return await asyncio.to_thread(analyze_file, file, file_matches, request)

    return list(await asyncio.gather(*(_bounded(f, ms) for f, ms in sorted(by_file.items()))))


async def _review(reviewer: Reviewer, proposed: list[FilePlan]) -> ReviewDecision:
    decision = reviewer.review(proposed)
    if inspect.isawaitable(decision):
        decision = await decision
    return decision


def _outcomes_for(plan: FilePlan) -> list[OccurrenceOutcome]:
    outcomes = []
    edited = {(e.line, e.start, e.end) for e in plan.edits}

    for occ in plan.occurrences:
        if plan.skipped and (occ.binding is not Binding.NOT_BOUND):
            reason = plan.skip_reason.value
            if occ.binding is Binding.AMBIGUOUS:
                reason = f"{SkipReason.SCOPE_AMBIGUOUS.value}: {occ.reason}"
            outcomes.append(OccurrenceOutcome(occ, Disposition.SKIPPED, reason))
        elif occ.binding is Binding.BOUND:
            note = "rewritten" if (occ.line, occ.start, occ.end) in edited else "name unchanged"
            outcomes.append(OccurrenceOutcome(occ, Disposition.REWRITE, f"{occ.reason}; {note}"))
        else:
            outcomes.append(OccurrenceOutcome(occ, Disposition.IRRELEVANT, occ.reason))

    return outcomes


def _build_result(
    request: RenameRequest,
    plans: list[FilePlan],
    dry_run: bool,
    files_changed: int,
    relocations: list[tuple[str, str]],
) -> CommitResult:
    result = CommitResult(
        request=request,
        files_changed=files_changed,
        relocations=relocations,
        dry_run=dry_run,
        plans=plans,
    )
    for plan in plans:
        if plan.skipped:
            result.files_skipped.append(SkippedFile(str(plan.file), plan.skip_reason, plan.skip_detail))
        result.outcomes.extend(_outcomes_for(plan))
    return result


async def run_rename(
    root: Union[str, Path],
    source_fqn: str,
    target_fqn: str,
    options: Optional[RenameOptions] = None,
    *,
    provider: Optional[SearchProvider] = None,
    reviewer: Optional[Reviewer] = None,
    events: Optional[EventLog] = None,
    cancel: Optional[CancelToken] = None,
) -> CommitResult:
    """
    Rename ``source_fqn`` to ``target_fqn`` throughout ``root``.

    Args:
        root: Directory to rename within
        source_fqn: Current fully-qualified name (e.g. "com.foo.Bar")
        target_fqn: New fully-qualified name (e.g. "net.baz.Quux")
        options: RenameOptions (dry_run, extensions, excludes, ...)
        provider: Search provider (default: per options.search_provider)
        reviewer: Decides which proposed files to commit (default: all)
        events: Event log to report progress to
        cancel: Token checked before the commit phase

    Returns:
        CommitResult; with options.dry_run the tree is untouched and the
        result describes what would change

    Raises:
        InvalidIdentifier: malformed FQN (before any filesystem access)
        InvalidRoot: root is not a directory
        OperationCancelled: cancel token set before commit
        ConcurrentOperationConflict: another rename holds an overlapping root
        IoFailure: commit failed; all changes were rolled back
    """
    request = RenameRequest.parse(source_fqn, target_fqn)
    options = options or RenameOptions()
    events = events or EventLog()

    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise InvalidRoot(f"Not a directory: {root}")

    provider = provider or get_provider(options.search_provider)
    scope = SearchScope(
        extensions=options.extensions,
        ignore_spec=load_all_ignores(root_path, options.exclude_patterns, options.use_gitignore),
        max_file_size=options.max_file_size,
        max_concurrency=options.max_concurrency,
    )

    logger.info(f"Renaming {request.source.fqn} → {request.target.fqn} under {root_path}")

    try:
        matches = await scan(root_path, request.source, provider, scope, events)
        analyses = await _analyze_all(matches, request, options.max_concurrency)
        plans = [plan_file(a, request, root_path) for a in analyses]

        for plan in plans:
            if plan.skipped:
                events.emit(
                    EventKind.CONFLICT_DETECTED,
                    f"{plan.file}: {plan.skip_reason.value} {plan.skip_detail}".strip(),
                    path=str(plan.file),
                    reason=plan.skip_reason.value,
                )

        proposed = [p for p in plans if not p.skipped and p.has_changes]
        events.emit(EventKind.PLAN_READY, f"{len(proposed)} files to change", files=len(proposed))

        if cancel is not None:
            cancel.raise_if_cancelled()

        if not options.dry_run and proposed:
            decision = await _review(reviewer or AcceptAll(), proposed)
            for plan in proposed:
                if not decision.accepts(plan.file) or not options.is_selected(plan.file, root_path):
                    plan.skip(SkipReason.REJECTED, "not accepted for commit")
            proposed = [p for p in proposed if not p.skipped]

        if options.dry_run:
            relocations = [(str(p.file), str(p.relocate_to)) for p in proposed if p.relocate_to]
            result = _build_result(request, plans, True, len(proposed), relocations)
        else:
            if cancel is not None:
                cancel.raise_if_cancelled()
            with RootLock(root_path):
                report = await asyncio.to_thread(
                    apply_plans, proposed, root_path, events, cancel, options.prune_empty_dirs
                )
            result = _build_result(request, plans, False, len(report.files_changed), report.relocations)

    except RehomeError as e:
        events.emit(EventKind.OPERATION_FAILED, f"{type(e).__name__}: {e}", error=type(e).__name__)
        raise

    events.emit(
        EventKind.OPERATION_COMPLETED,
        f"{'planned' if result.dry_run else 'changed'} {result.files_changed} files, "
        f"skipped {len(result.files_skipped)}",
        files_changed=result.files_changed,
        files_skipped=len(result.files_skipped),
        dry_run=result.dry_run,
    )
    return result
