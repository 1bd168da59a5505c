"""
Reviewer contract.

The interactive reviewer (a terminal UI, an agent, a test) sees every
proposed FilePlan with its diff and conflict reason and answers which files
to commit. The engine supports both whole-operation and per-file answers,
and "dry run" never asks at all.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Iterable, Optional, Protocol, Union

from rehome.refactor.types import FilePlan


@dataclass(frozen=True)
class ReviewDecision:
    """Accepted files; ``accepted=None`` means every proposed file."""

    accepted: Optional[frozenset[Path]] = None

    @classmethod
    def accept_all(cls) -> "ReviewDecision":
        return cls(accepted=None)

    @classmethod
    def reject_all(cls) -> "ReviewDecision":
        return cls(accepted=frozenset())

    @classmethod
    def only(cls, paths: Iterable[Path]) -> "ReviewDecision":
        return cls(accepted=frozenset(Path(p).resolve() for p in paths))

    def accepts(self, path: Path) -> bool:
        return self.accepted is None or path.resolve() in self.accepted


class Reviewer(Protocol):
    def review(self, plans: list[FilePlan]) -> Union[ReviewDecision, Awaitable[ReviewDecision]]:
        """Decide which of the proposed (non-skipped) plans to commit."""
        ...


class AcceptAll:
    def review(self, plans: list[FilePlan]) -> ReviewDecision:
        return ReviewDecision.accept_all()


class AcceptSelected:
    """Accept a fixed set of files (the "commit selected subset" path)."""

    def __init__(self, paths: Iterable[Path]):
        self.decision = ReviewDecision.only(paths)

    def review(self, plans: list[FilePlan]) -> ReviewDecision:
        return self.decision


def render_plan(plan: FilePlan, root: Optional[Path] = None) -> str:
    """Human-readable diff for one plan: old line -> new line, plus any conflict."""
    path = plan.file
    if root is not None:
        try:
            path = plan.file.relative_to(root)
        except ValueError:
            pass

    lines = [f"📄 {path}"]
    if plan.skipped:
        detail = f": {plan.skip_detail}" if plan.skip_detail else ""
        lines.append(f"   ⚠️  skipped ({plan.skip_reason.value}){detail}")
        return "\n".join(lines)

    for diff in plan.diff:
        lines.append(f"   {diff.line:>5} - {diff.old.strip()}")
        if diff.removed:
            continue
        for new_line in diff.new.split("\n"):
            lines.append(f"   {'':>5} + {new_line.strip()}")
    if plan.relocate_to is not None:
        target = plan.relocate_to
        if root is not None:
            try:
                target = plan.relocate_to.relative_to(root)
            except ValueError:
                pass
        lines.append(f"   ↪ move to {target}")
    return "\n".join(lines)
