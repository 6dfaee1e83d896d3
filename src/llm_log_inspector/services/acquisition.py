"""Reading raw log text from its source.

This is the only asynchronous step; everything after it works on plain text.
"""

from __future__ import annotations

import asyncio
import shutil
import sys
from pathlib import Path

import structlog

from llm_log_inspector.core.errors import AcquisitionError

logger = structlog.get_logger()

STDIN_SOURCE = "-"
CLIPBOARD_SOURCE = "clipboard"

# Tried in order; the first command found on PATH is used.
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbpaste",),
    ("wl-paste", "--no-newline"),
    ("xclip", "-selection", "clipboard", "-o"),
    ("xsel", "--clipboard", "--output"),
)


async def read_clipboard() -> str:
    """Read the system clipboard through the first available paste command."""
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]) is None:
            continue
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            raise AcquisitionError(CLIPBOARD_SOURCE, str(e)) from e
        if process.returncode != 0:
            reason = stderr.decode(errors="replace").strip() or f"exit code {process.returncode}"
            raise AcquisitionError(CLIPBOARD_SOURCE, reason)
        logger.debug("clipboard_read", command=command[0], size=len(stdout))
        return stdout.decode("utf-8", errors="replace")

    raise AcquisitionError(CLIPBOARD_SOURCE, "no clipboard command available")


async def read_file(path: Path) -> str:
    """Read a UTF-8 log file."""

    def _read() -> str:
        return path.read_text(encoding="utf-8")

    try:
        return await asyncio.to_thread(_read)
    except (OSError, UnicodeDecodeError) as e:
        raise AcquisitionError(str(path), str(e)) from e


async def read_stdin() -> str:
    try:
        return await asyncio.to_thread(sys.stdin.read)
    except (OSError, UnicodeDecodeError) as e:
        raise AcquisitionError("stdin", str(e)) from e


async def read_input(source: str | Path) -> str:
    """Obtain raw log text.

    Args:
        source: ``"-"`` for stdin, ``"clipboard"`` for the system clipboard,
            anything else is a file path.

    Returns:
        The raw text.

    Raises:
        AcquisitionError: If the source cannot be read.
    """
    if source == STDIN_SOURCE:
        text = await read_stdin()
    elif source == CLIPBOARD_SOURCE:
        text = await read_clipboard()
    else:
        text = await read_file(Path(source))
    logger.info("input_acquired", source=str(source), size=len(text))
    return text
