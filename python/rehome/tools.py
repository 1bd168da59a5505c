"""
MCP tool implementations.

Thin adapters between the MCP surface and the rename engine: they build
RenameOptions, call run_rename, and render the result in the requested
output format. Operation errors come back as messages rather than
exceptions so the client sees why a rename was refused.
"""

import logging
from pathlib import Path
from typing import Any, Literal, Optional, Union

from rehome.config import RenameOptions
from rehome.errors import ConcurrentOperationConflict, IoFailure, RehomeError
from rehome.refactor import run_rename
from rehome.refactor.formatters import (
    format_occurrences_flat,
    format_result_as_json,
    format_result_as_text,
)
from rehome.toon_utils import create_toonable_result

logger = logging.getLogger("rehome.tools")


def _error_payload(e: RehomeError) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": str(e), "type": type(e).__name__}
    if isinstance(e, ConcurrentOperationConflict):
        payload["retryable"] = True
    if isinstance(e, IoFailure):
        payload["rolled_back"] = e.rolled_back
        if e.rollback_errors:
            payload["rollback_errors"] = e.rollback_errors
    return payload


def _format_error_text(payload: dict[str, Any]) -> str:
    lines = [f"❌ {payload['type']}: {payload['error']}"]
    if payload.get("retryable"):
        lines.append("Another rename is running on this tree; retry once it finishes.")
    if payload.get("rolled_back"):
        lines.append(f"Rolled back {len(payload['rolled_back'])} files; the tree is unchanged.")
    for err in payload.get("rollback_errors", []):
        lines.append(f"   ⚠️  {err}")
    return "\n".join(lines)


async def rename_fqn(
    old_fqn: str,
    new_fqn: str,
    root: str = ".",
    dry_run: bool = True,
    exclude: Optional[list[str]] = None,
    search: Optional[str] = None,
    output_format: Literal["text", "json", "toon"] = "text",
) -> Union[str, dict[str, Any]]:
    """
    Rename a Java/Kotlin type by its fully-qualified name across a source tree.

    Rewrites import statements, fully-qualified references and simple-name
    usages that actually bind to the type, then moves the declaring file
    into the new package directory. Comments, string literals and
    same-named types from other packages are left alone. Files whose scope
    cannot be decided are skipped and reported, never guessed at.

    IMPORTANT: Default dry_run=True shows a preview WITHOUT modifying files.
    Set dry_run=False only after reviewing the preview. A commit is
    all-or-nothing: if any write fails, every file is restored.

    Args:
        old_fqn: Current fully-qualified name (e.g. "com.acme.billing.Invoice")
        new_fqn: New fully-qualified name (e.g. "com.acme.ledger.Invoice")
        root: Directory to rename within (default: current directory)
        dry_run: If True (default), show preview only. If False, apply changes.
        exclude: Extra gitignore-style patterns to leave out of the rename
        search: Search provider, "regex" or "ripgrep" (default: REHOME_SEARCH or regex)
        output_format: "text" (default), "json", or "toon"

    Returns:
        - dry_run=True: Preview of every file and line that would change
        - dry_run=False: Summary of applied changes, relocations and skips

    Examples:
        # Preview a package move
        await rename_fqn("com.acme.billing.Invoice", "com.acme.ledger.Invoice")

        # Apply a type rename after reviewing
        await rename_fqn("com.acme.Invoice", "com.acme.Bill", dry_run=False)
    """
    overrides: dict[str, Any] = {"dry_run": dry_run}
    if exclude:
        overrides["exclude_patterns"] = list(exclude)
    if search:
        overrides["search_provider"] = search

    root_path = Path(root).resolve()

    try:
        options = RenameOptions.from_env(**overrides)
        result = await run_rename(root_path, old_fqn, new_fqn, options)
    except RehomeError as e:
        logger.warning(f"rename_fqn {old_fqn} → {new_fqn} failed: {e}")
        payload = _error_payload(e)
        return _format_error_text(payload) if output_format == "text" else payload
    except ValueError as e:
        # Bad option values (e.g. an unknown search provider)
        payload = {"error": str(e), "type": "ValueError"}
        return _format_error_text(payload) if output_format == "text" else payload

    toon_data = {
        "old_fqn": result.request.source.fqn,
        "new_fqn": result.request.target.fqn,
        "dry_run": result.dry_run,
        "files_changed": result.files_changed,
        "files_skipped": len(result.files_skipped),
        "occurrences": format_occurrences_flat(result),
    }

    return create_toonable_result(
        json_data=format_result_as_json(result),
        toon_data=toon_data,
        output_format=output_format,
        tool_name="rename_fqn",
        text_formatter=lambda _data: format_result_as_text(result, root_path),
    )
