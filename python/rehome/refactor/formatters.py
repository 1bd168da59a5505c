"""Text and JSON renderings of a CommitResult."""

from pathlib import Path
from typing import Any, Optional

from rehome.refactor.review import render_plan
from rehome.refactor.types import CommitResult, Disposition


def _rel(path: str, root: Optional[Path]) -> str:
    if root is None:
        return path
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return path


def format_result_as_text(result: CommitResult, root: Optional[Path] = None) -> str:
    """Format a preview or commit result for human-readable output."""
    request = result.request
    arrow = f"'{request.source.fqn}' → '{request.target.fqn}'"
    rewrites = result.count(Disposition.REWRITE)
    irrelevant = result.count(Disposition.IRRELEVANT)

    if result.dry_run:
        lines = [
            f"🔍 Rename Preview: {arrow}",
            f"Found {result.total_occurrences} occurrences: {rewrites} to rewrite, "
            f"{irrelevant} unrelated, {result.count(Disposition.SKIPPED)} skipped",
            f"{result.files_changed} files would change",
            "",
        ]
    else:
        lines = [
            f"✅ Rename Complete: {arrow}",
            f"Modified {result.files_changed} files ({rewrites} occurrences rewritten)",
            "",
        ]

    for plan in result.plans:
        if plan.has_changes and not plan.skipped:
            lines.append(render_plan(plan, root))
            lines.append("")

    if result.relocations:
        lines.append("📦 Relocations:")
        for old, new in result.relocations:
            lines.append(f"   {_rel(old, root)} → {_rel(new, root)}")
        lines.append("")

    if result.files_skipped:
        lines.append("⚠️  Skipped files:")
        for skipped in result.files_skipped:
            detail = f" - {skipped.detail}" if skipped.detail else ""
            lines.append(f"   {_rel(skipped.path, root)} [{skipped.reason.value}]{detail}")
        lines.append("")

    if result.dry_run:
        lines.append("Set dry_run=False to apply changes.")
    return "\n".join(lines).rstrip("\n")


def format_result_as_json(result: CommitResult) -> dict[str, Any]:
    """Format a result for JSON output."""
    return {
        "old_fqn": result.request.source.fqn,
        "new_fqn": result.request.target.fqn,
        "dry_run": result.dry_run,
        "files_changed": result.files_changed,
        "files_skipped": [
            {"path": s.path, "reason": s.reason.value, "detail": s.detail}
            for s in result.files_skipped
        ],
        "relocations": [{"from": old, "to": new} for old, new in result.relocations],
        "diffs": [
            {
                "path": str(p.file),
                "relocate_to": str(p.relocate_to) if p.relocate_to else None,
                "lines": [
                    {"line": d.line, "old": d.old, "new": d.new, "removed": d.removed} for d in p.diff
                ],
            }
            for p in result.plans
            if p.has_changes and not p.skipped
        ],
        "occurrences": [
            {
                "path": str(o.occurrence.file),
                "line": o.occurrence.line,
                "column": o.occurrence.start + 1,
                "role": o.occurrence.role.value,
                "disposition": o.disposition.value,
                "reason": o.reason,
            }
            for o in result.outcomes
        ],
    }


def format_occurrences_flat(result: CommitResult) -> list[dict[str, Any]]:
    """Flat rows (primitives only) for TOON encoding."""
    return [
        {
            "path": str(o.occurrence.file),
            "line": o.occurrence.line,
            "role": o.occurrence.role.value,
            "disposition": o.disposition.value,
            "reason": o.reason,
        }
        for o in result.outcomes
    ]
