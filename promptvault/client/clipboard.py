"""Copying resolved prompts to the system clipboard.

Writers are tried in order by `FallbackClipboard`: a platform copy command
(`CommandClipboard`) first, then a Tk selection (`SelectionClipboard`).
`resolve_and_copy` fills placeholders before handing the text to a writer.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Union

from .templates import Variable, extract_variables, initial_values, replace_variables

logger = logging.getLogger(__name__)

COPY_COMMANDS = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("clip",),
)


class ClipboardError(RuntimeError):
    """Raised by a clipboard strategy that could not write the text."""


class ClipboardStrategy:
    name = "clipboard"

    async def write_text(self, text: str) -> None:
        raise NotImplementedError


class CommandClipboard(ClipboardStrategy):
    """Pipes text into the platform copy command, off the event loop."""

    name = "command"

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        runner: Callable[..., "subprocess.CompletedProcess[bytes]"] = subprocess.run,
        timeout: float = 5.0,
    ) -> None:
        self._command = list(command) if command else None
        self._runner = runner
        self._timeout = timeout

    def resolve_command(self) -> Optional[List[str]]:
        if self._command:
            return self._command
        for candidate in COPY_COMMANDS:
            if shutil.which(candidate[0]):
                return list(candidate)
        return None

    def _write_blocking(self, text: str) -> None:
        command = self.resolve_command()
        if command is None:
            raise ClipboardError("No clipboard command found on PATH")
        try:
            result = self._runner(
                command,
                input=text.encode("utf-8"),
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise ClipboardError(f"{command[0]} failed: {exc}") from exc
        if result.returncode != 0:
            stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
            raise ClipboardError(f"{command[0]} exited with {result.returncode}: {stderr}")

    async def write_text(self, text: str) -> None:
        await asyncio.to_thread(self._write_blocking, text)


class SelectionClipboard(ClipboardStrategy):
    """Copies through the selection of a hidden Tk window."""

    name = "selection"

    def __init__(self, root_factory: Optional[Callable[[], Any]] = None) -> None:
        self._root_factory = root_factory

    def _create_root(self) -> Any:
        if self._root_factory is not None:
            return self._root_factory()
        import tkinter

        root = tkinter.Tk()
        root.withdraw()
        return root

    async def write_text(self, text: str) -> None:
        try:
            root = self._create_root()
        except Exception as exc:  # tkinter raises TclError without a display
            raise ClipboardError(f"Selection surface unavailable: {exc}") from exc
        try:
            root.clipboard_clear()
            root.clipboard_append(text)
            root.update()
        except Exception as exc:
            raise ClipboardError(f"Selection copy failed: {exc}") from exc
        finally:
            root.destroy()


class ClipboardWriter(Protocol):
    async def copy(self, text: str) -> bool:
        ...


class FallbackClipboard:
    """Tries each strategy in order and reports whether any of them wrote the text."""

    def __init__(self, strategies: Sequence[ClipboardStrategy]) -> None:
        self._strategies = list(strategies)

    @property
    def strategies(self) -> List[ClipboardStrategy]:
        return list(self._strategies)

    async def copy(self, text: str) -> bool:
        if not text:
            return False
        for strategy in self._strategies:
            try:
                await strategy.write_text(text)
            except ClipboardError as exc:
                logger.warning("Clipboard strategy '%s' failed, trying next: %s", strategy.name, exc)
                continue
            return True
        logger.error("Every clipboard strategy failed")
        return False


def default_clipboard() -> FallbackClipboard:
    return FallbackClipboard([CommandClipboard(), SelectionClipboard()])


class CopyStatus(str, Enum):
    COPIED = "copied"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class CopyOutcome:
    status: CopyStatus
    text: Optional[str] = None

    @property
    def copied(self) -> bool:
        return self.status is CopyStatus.COPIED


ValuesResult = Optional[Mapping[str, str]]
ValuesDialog = Callable[
    [List[Variable], Dict[str, str]], Union[ValuesResult, Awaitable[ValuesResult]]
]


async def resolve_and_copy(
    prompt: Any, writer: ClipboardWriter, prompt_for_values: ValuesDialog
) -> CopyOutcome:
    """Copy a prompt, asking for placeholder values first when it has any.

    ``prompt_for_values`` receives the variables and their initial values and
    returns the completed mapping, or ``None`` to cancel. A cancelled or failed
    copy never raises.
    """
    content = prompt.content or ""
    variables = extract_variables(content)
    if variables:
        result = prompt_for_values(variables, initial_values(variables))
        if inspect.isawaitable(result):
            result = await result
        if result is None:
            logger.info("Copy of prompt %s cancelled", prompt.id)
            return CopyOutcome(CopyStatus.CANCELLED)
        text = replace_variables(content, result)
    else:
        text = content

    try:
        copied = await writer.copy(text)
    except Exception:
        logger.exception("Clipboard write failed for prompt %s", prompt.id)
        copied = False
    if not copied:
        return CopyOutcome(CopyStatus.FAILED, text)
    return CopyOutcome(CopyStatus.COPIED, text)


__all__ = [
    "ClipboardError",
    "ClipboardStrategy",
    "ClipboardWriter",
    "CommandClipboard",
    "CopyOutcome",
    "CopyStatus",
    "FallbackClipboard",
    "SelectionClipboard",
    "default_clipboard",
    "resolve_and_copy",
]
