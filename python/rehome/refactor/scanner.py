"""
Occurrence scanner.

Runs two searches through the search provider (the dotted FQN and the bare
simple name), then tightens the provider's word boundaries to identifier
boundaries and drops simple-name hits that are part of an FQN hit. Read-only.
"""

import asyncio
import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Optional

from rehome.events import EventKind, EventLog
from rehome.identifier import Identifier
from rehome.ignore_patterns import should_ignore
from rehome.search.types import RawMatch, SearchProvider, SearchScope

logger = logging.getLogger("rehome.scanner")


def _is_identifier_char(ch: str) -> bool:
    return ch == "$" or ch == "_" or ch.isalnum()


def _word_pattern(text: str) -> str:
    """Regex for ``text`` with word boundaries where the regex engine allows them."""
    pattern = re.escape(text)
    if re.match(r"\w", text[0]):
        pattern = r"\b" + pattern
    if re.match(r"\w", text[-1]):
        pattern = pattern + r"\b"
    return pattern


def fqn_pattern(identifier: Identifier) -> str:
    return _word_pattern(identifier.fqn)


def simple_name_pattern(identifier: Identifier) -> str:
    return _word_pattern(identifier.simple_name)


def _has_identifier_boundaries(m: RawMatch, forbid_dot_before: bool) -> bool:
    before = m.line_text[m.start - 1] if m.start > 0 else ""
    after = m.line_text[m.end] if m.end < len(m.line_text) else ""
    if before and (_is_identifier_char(before) or (forbid_dot_before and before == ".")):
        return False
    if after and _is_identifier_char(after):
        return False
    return True


def refine_matches(
    fqn_matches: list[RawMatch],
    simple_matches: list[RawMatch],
    identifier: Identifier,
) -> list[RawMatch]:
    """
    Merge and clean both searches' results.

    - FQN hits must not be preceded by "." (``x.com.foo.Bar`` is not ours)
    - Either kind must sit on identifier boundaries ("$" counts as a letter)
    - Simple-name hits inside an FQN hit are dropped
    """
    fqn_hits = [
        m for m in fqn_matches
        if m.text == identifier.fqn and _has_identifier_boundaries(m, forbid_dot_before=True)
    ]

    covered: dict[tuple[Path, int], list[tuple[int, int]]] = defaultdict(list)
    for m in fqn_hits:
        covered[(m.file, m.line)].append((m.start, m.end))

    simple_hits = [
        m for m in simple_matches
        if m.text == identifier.simple_name
        and _has_identifier_boundaries(m, forbid_dot_before=False)
        and not any(s <= m.start and m.end <= e for s, e in covered[(m.file, m.line)])
    ]

    unique = {(m.file, m.line, m.start, m.end): m for m in fqn_hits + simple_hits}
    return sorted(unique.values(), key=lambda m: (str(m.file), m.line, m.start))


async def scan(
    root: Path,
    identifier: Identifier,
    provider: SearchProvider,
    scope: SearchScope,
    events: Optional[EventLog] = None,
) -> list[RawMatch]:
    """
    Find every candidate occurrence of ``identifier`` under ``root``.

    Returns an empty list when nothing matches.
    """
    events = events or EventLog()
    events.emit(
        EventKind.SCAN_STARTED,
        f"scanning {root} for {identifier.fqn} via {provider.name}",
        root=str(root),
        fqn=identifier.fqn,
    )

    fqn_matches, simple_matches = await asyncio.gather(
        provider.search(root, fqn_pattern(identifier), scope),
        provider.search(root, simple_name_pattern(identifier), scope),
    )

    matches = [
        m for m in refine_matches(fqn_matches, simple_matches, identifier)
        if scope.ignore_spec is None
        or not should_ignore(m.file, root, scope.ignore_spec, scope.extensions)
    ]

    for m in matches:
        events.emit(
            EventKind.OCCURRENCE_FOUND,
            f"{m.file}:{m.line}: {m.line_text.strip()}",
            path=str(m.file),
            line=m.line,
            column=m.start + 1,
        )

    files = {m.file for m in matches}
    logger.info(f"🔍 Found {len(matches)} candidate occurrences of {identifier.fqn} in {len(files)} files")
    return matches
