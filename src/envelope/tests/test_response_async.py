"""Tests for asynchronous guarded execution and the guarded decorator."""

from __future__ import annotations

import asyncio
import io

import pytest

from envelope import Response, ResponseException, guarded
from envelope.observability import BoundLogger, ConsoleRenderer, MemoryRenderer


# ═════════════════════════════════════════════════════════════════════════════
# run_guarded_async
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_async_success_after_suspend(log: BoundLogger, memory: MemoryRenderer) -> None:
    async def work(r: Response[str]) -> None:
        await asyncio.sleep(0)
        r.data = "ok"

    result = await Response.run_guarded_async(work, log=log)

    assert (result.code, result.data) == (0, "ok")
    assert memory.entries == []


@pytest.mark.asyncio
async def test_async_structured_failure(log: BoundLogger) -> None:
    reached: list[bool] = []

    async def work(r: Response[str]) -> None:
        await asyncio.sleep(0)
        r.throw(7, "bad input")
        reached.append(True)

    result = await Response.run_guarded_async(work, log=log)

    assert (result.code, result.message) == (7, "bad input")
    assert reached == []


@pytest.mark.asyncio
async def test_async_unstructured_failure(log: BoundLogger, memory: MemoryRenderer) -> None:
    async def work(r: Response[int]) -> None:
        await asyncio.sleep(0)
        r.data = {}["missing"]

    result = await Response.run_guarded_async(work, log=log)

    assert result.code == -1
    assert result.message == "'missing'"
    assert len(memory.events("error")) == 1


@pytest.mark.asyncio
async def test_async_callback_ordering(log: BoundLogger) -> None:
    seen: list[tuple[int, str | None]] = []

    async def on_error(r: Response[int]) -> None:
        await asyncio.sleep(0)
        seen.append((r.code, r.message))

    async def structured(r: Response[int]) -> None:
        r.throw(5, "classified")

    async def unstructured(r: Response[int]) -> None:
        raise RuntimeError("unexpected")

    await Response.run_guarded_async(structured, on_error, log=log)
    await Response.run_guarded_async(unstructured, on_error, log=log)

    assert seen == [(0, None), (-1, "unexpected")]


@pytest.mark.asyncio
async def test_async_on_error_completes_before_return(log: BoundLogger) -> None:
    done: list[str] = []

    async def on_error(r: Response[int]) -> None:
        await asyncio.sleep(0.01)
        done.append("handled")

    await Response.run_guarded_async(lambda r: r.throw("x"), on_error, log=log)
    assert done == ["handled"]


@pytest.mark.asyncio
async def test_async_accepts_plain_callables(log: BoundLogger) -> None:
    seen: list[int] = []

    def work(r: Response[int]) -> None:
        raise ValueError("sync work")

    result = await Response.run_guarded_async(work, lambda r: seen.append(r.code), log=log)

    assert result.message == "sync work"
    assert seen == [-1]


@pytest.mark.asyncio
async def test_async_failing_on_error_is_absorbed(log: BoundLogger, memory: MemoryRenderer) -> None:
    async def on_error(r: Response[int]) -> None:
        raise RuntimeError("handler broke")

    result = await Response.run_guarded_async(lambda r: r.throw(2, "first"), on_error, log=log)

    assert (result.code, result.message) == (2, "first")
    assert memory.events("warning") == ["error handler failed"]


@pytest.mark.asyncio
async def test_async_broken_sink_does_not_escape_boundary() -> None:
    out = io.StringIO()
    out.close()
    log = BoundLogger(_renderer=ConsoleRenderer(output=out, colors=False))

    async def on_error(r: Response[int]) -> None:
        raise RuntimeError("handler broke")

    async def structured(r: Response[int]) -> None:
        r.throw(7, "bad")

    async def unstructured(r: Response[int]) -> None:
        raise ValueError("boom")

    first = await Response.run_guarded_async(structured, on_error, log=log)
    second = await Response.run_guarded_async(unstructured, on_error, log=log)

    assert (first.code, first.message) == (7, "bad")
    assert (second.code, second.message) == (-1, "boom")


@pytest.mark.asyncio
async def test_async_invalid_settings_do_not_escape_boundary(
    monkeypatch: pytest.MonkeyPatch, log: BoundLogger
) -> None:
    monkeypatch.setenv("ENVELOPE_LOG_INCLUDE_TRACEBACK", "maybe")

    async def work(r: Response[int]) -> None:
        await asyncio.sleep(0)
        raise ValueError("boom")

    injected = await Response.run_guarded_async(work, log=log)
    default = await Response.run_guarded_async(lambda r: r.throw(4, "bad"))

    assert (injected.code, injected.message) == (-1, "boom")
    assert (default.code, default.message) == (4, "bad")


@pytest.mark.asyncio
async def test_async_cancellation_absorbed(log: BoundLogger, memory: MemoryRenderer) -> None:
    async def work(r: Response[int]) -> None:
        await asyncio.sleep(0)
        raise asyncio.CancelledError()

    result = await Response.run_guarded_async(work, log=log)

    assert result.code == -1
    assert result.message == "CancelledError"
    assert memory.entries[0].context["kind"] == "unstructured"


@pytest.mark.asyncio
async def test_async_result_unwrap(log: BoundLogger) -> None:
    async def work(r: Response[int]) -> None:
        r.throw(11, "timeout talking to storage")

    result = await Response.run_guarded_async(work, log=log)

    with pytest.raises(ResponseException, match="^upload: timeout talking to storage$"):
        result.unwrap_or_fail("upload:")


# ═════════════════════════════════════════════════════════════════════════════
# guarded decorator
# ═════════════════════════════════════════════════════════════════════════════


def test_guarded_sync(log: BoundLogger) -> None:
    @guarded(log=log)
    def parse(text: str) -> int:
        return int(text)

    assert parse("12").data == 12
    failed = parse("x")
    assert failed.code == -1
    assert "invalid literal" in (failed.message or "")
    assert parse.__name__ == "parse"


def test_guarded_bare_decorator_structured_failure() -> None:
    @guarded
    def reject() -> None:
        raise ResponseException.create("rejected", 403)

    result = reject()
    assert (result.code, result.message) == (403, "rejected")


@pytest.mark.asyncio
async def test_guarded_async(log: BoundLogger) -> None:
    calls: list[int] = []

    @guarded(on_error=lambda r: calls.append(r.code), log=log)
    async def fetch(ok: bool) -> str:
        await asyncio.sleep(0)
        if not ok:
            raise ConnectionError("refused")
        return "payload"

    assert (await fetch(True)).data == "payload"
    failed = await fetch(False)
    assert (failed.code, failed.message) == (-1, "refused")
    assert calls == [-1]
