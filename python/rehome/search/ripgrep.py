"""
Search provider backed by ripgrep (``rg --json``).

ripgrep reports byte offsets; they are converted to character columns here so
the rest of the engine can slice decoded line text directly.
"""

import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import Any, Optional

from rehome.errors import SearchProviderError
from rehome.search.types import RawMatch, SearchScope

logger = logging.getLogger("rehome.search")


def _strip_terminator(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


def _byte_to_char(line_bytes: bytes, offset: int) -> int:
    return len(line_bytes[:offset].decode("utf-8", errors="replace"))


def parse_json_events(stdout: bytes, root: Path) -> list[RawMatch]:
    """
    Convert ripgrep's JSON Lines output into RawMatch records.

    Only ``match`` events matter; ``begin``/``end``/``context``/``summary``
    are skipped. Lines that ripgrep could not decode as UTF-8 (reported as
    base64 ``bytes``) are dropped with a debug log.
    """
    matches: list[RawMatch] = []

    for raw_line in stdout.splitlines():
        if not raw_line.strip():
            continue
        try:
            event: dict[str, Any] = json.loads(raw_line)
        except json.JSONDecodeError as e:
            logger.warning(f"Unparseable ripgrep output line: {e}")
            continue

        if event.get("type") != "match":
            continue

        data = event["data"]
        path_text = data.get("path", {}).get("text")
        lines_text = data.get("lines", {}).get("text")
        if path_text is None or lines_text is None:
            logger.debug("Skipping non-UTF-8 ripgrep match")
            continue

        file_path = Path(path_text)
        if not file_path.is_absolute():
            file_path = root / file_path

        line_bytes = lines_text.encode("utf-8")
        line_text = _strip_terminator(lines_text)

        for sub in data.get("submatches", []):
            start = _byte_to_char(line_bytes, sub["start"])
            end = _byte_to_char(line_bytes, sub["end"])
            matches.append(
                RawMatch(
                    file=file_path,
                    line=data["line_number"],
                    start=start,
                    end=end,
                    text=line_text[start:end],
                    line_text=line_text,
                )
            )

    return matches


class RipgrepSearchProvider:
    """Search provider that shells out to ripgrep."""

    name = "ripgrep"

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable or shutil.which("rg") or "rg"

    def build_args(self, root: Path, pattern: str, scope: SearchScope) -> list[str]:
        args = [
            self.executable,
            "--json",
            "--no-config",
            "--max-filesize",
            str(scope.max_file_size),
            "--threads",
            str(max(1, scope.max_concurrency)),
        ]
        for ext in scope.extensions:
            args.extend(["--glob", f"*{ext}"])
        args.extend(["-e", pattern, "--", str(root)])
        return args

    async def search(self, root: Path, pattern: str, scope: SearchScope) -> list[RawMatch]:
        args = self.build_args(root, pattern, scope)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise SearchProviderError(f"ripgrep executable not found: {self.executable}") from e

        stdout, stderr = await process.communicate()

        # rg exits 1 when nothing matched, 2 on errors (possibly with partial results)
        if process.returncode == 2 and not stdout:
            raise SearchProviderError(
                f"ripgrep failed: {stderr.decode('utf-8', errors='replace').strip()}"
            )
        if process.returncode == 2:
            logger.warning(f"ripgrep reported errors: {stderr.decode('utf-8', errors='replace').strip()}")

        results = parse_json_events(stdout, root)
        logger.debug(f"ripgrep search {pattern!r}: {len(results)} matches")
        return results
