import subprocess
from typing import List

import pytest

from ..clipboard import (
    ClipboardError,
    ClipboardStrategy,
    CommandClipboard,
    CopyStatus,
    FallbackClipboard,
    SelectionClipboard,
    resolve_and_copy,
)
from ..prompts import new_prompt


class RecordingWriter:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.writes: List[str] = []

    async def copy(self, text: str) -> bool:
        self.writes.append(text)
        return self.result


class RaisingWriter:
    async def copy(self, text: str) -> bool:
        raise RuntimeError("clipboard gone")


class FakeStrategy(ClipboardStrategy):
    def __init__(self, name: str, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.writes: List[str] = []

    async def write_text(self, text: str) -> None:
        if self.fail:
            raise ClipboardError(f"{self.name} failed")
        self.writes.append(text)


class FakeRoot:
    def __init__(self) -> None:
        self.cleared = False
        self.appended: List[str] = []
        self.destroyed = False

    def clipboard_clear(self) -> None:
        self.cleared = True

    def clipboard_append(self, text: str) -> None:
        self.appended.append(text)

    def update(self) -> None:
        pass

    def destroy(self) -> None:
        self.destroyed = True


def _dialog_should_not_run(variables, values):
    raise AssertionError("values dialog must not be shown")


@pytest.mark.asyncio
async def test_plain_prompt_is_copied_without_dialog() -> None:
    writer = RecordingWriter()
    prompt = new_prompt(content="No placeholders here")

    outcome = await resolve_and_copy(prompt, writer, _dialog_should_not_run)

    assert outcome.status is CopyStatus.COPIED
    assert writer.writes == ["No placeholders here"]


@pytest.mark.asyncio
async def test_dialog_receives_defaults_and_result_is_substituted() -> None:
    writer = RecordingWriter()
    seen = {}

    async def dialog(variables, values):
        seen["names"] = [variable.name for variable in variables]
        seen["values"] = dict(values)
        return {"name": "Alice", "day": ""}

    prompt = new_prompt(content="Hi {{name:Bob}}, see you {{day}} {{name}}")

    outcome = await resolve_and_copy(prompt, writer, dialog)

    assert seen == {"names": ["name", "day"], "values": {"name": "Bob", "day": ""}}
    assert outcome.copied
    assert writer.writes == ["Hi Alice, see you  Alice"]


@pytest.mark.asyncio
async def test_synchronous_dialog_is_accepted() -> None:
    writer = RecordingWriter()
    prompt = new_prompt(content="{{a}}")

    outcome = await resolve_and_copy(prompt, writer, lambda variables, values: {"a": "x"})

    assert outcome.text == "x"
    assert writer.writes == ["x"]


@pytest.mark.asyncio
async def test_cancelled_dialog_writes_nothing() -> None:
    writer = RecordingWriter()
    prompt = new_prompt(content="Hi {{name}}")

    outcome = await resolve_and_copy(prompt, writer, lambda variables, values: None)

    assert outcome.status is CopyStatus.CANCELLED
    assert writer.writes == []


@pytest.mark.asyncio
async def test_writer_failure_is_reported_not_raised() -> None:
    prompt = new_prompt(content="text")

    refused = await resolve_and_copy(prompt, RecordingWriter(result=False), _dialog_should_not_run)
    raised = await resolve_and_copy(prompt, RaisingWriter(), _dialog_should_not_run)

    assert refused.status is CopyStatus.FAILED
    assert raised.status is CopyStatus.FAILED


@pytest.mark.asyncio
async def test_fallback_uses_next_strategy_after_failure() -> None:
    primary = FakeStrategy("primary", fail=True)
    secondary = FakeStrategy("secondary")
    tertiary = FakeStrategy("tertiary")

    copied = await FallbackClipboard([primary, secondary, tertiary]).copy("hello")

    assert copied is True
    assert secondary.writes == ["hello"]
    assert tertiary.writes == []


@pytest.mark.asyncio
async def test_fallback_reports_total_failure_and_skips_empty_text() -> None:
    strategy = FakeStrategy("only")

    assert await FallbackClipboard([FakeStrategy("a", fail=True)]).copy("x") is False
    assert await FallbackClipboard([strategy]).copy("") is False
    assert strategy.writes == []


@pytest.mark.asyncio
async def test_command_clipboard_pipes_text_to_command() -> None:
    calls = []

    def runner(command, **kwargs):
        calls.append((command, kwargs["input"]))
        return subprocess.CompletedProcess(command, 0, b"", b"")

    await CommandClipboard(command=["fake-copy"], runner=runner).write_text("héllo")

    assert calls == [(["fake-copy"], "héllo".encode("utf-8"))]


@pytest.mark.asyncio
async def test_command_clipboard_raises_on_non_zero_exit() -> None:
    def runner(command, **kwargs):
        return subprocess.CompletedProcess(command, 1, b"", b"no display")

    with pytest.raises(ClipboardError, match="no display"):
        await CommandClipboard(command=["fake-copy"], runner=runner).write_text("x")


@pytest.mark.asyncio
async def test_command_clipboard_without_command_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("shutil.which", lambda name: None)

    with pytest.raises(ClipboardError):
        await CommandClipboard().write_text("x")


@pytest.mark.asyncio
async def test_selection_clipboard_uses_hidden_root() -> None:
    root = FakeRoot()

    await SelectionClipboard(root_factory=lambda: root).write_text("copied")

    assert root.cleared
    assert root.appended == ["copied"]
    assert root.destroyed


@pytest.mark.asyncio
async def test_selection_clipboard_wraps_surface_errors() -> None:
    def no_display():
        raise RuntimeError("no display")

    with pytest.raises(ClipboardError):
        await SelectionClipboard(root_factory=no_display).write_text("x")
