"""HTTP traffic log module."""

from collections.abc import Iterable
import json
import logging
from types import SimpleNamespace
from typing import Any

from aiohttp import (
    ClientSession,
    TraceConfig,
    TraceRequestChunkSentParams,
    TraceRequestEndParams,
    TraceRequestExceptionParams,
    TraceRequestStartParams,
)

from trapdoor.utils import utils

_LOGGER = logging.getLogger(__name__)
_LOGGER_TRAFFIC = logging.getLogger(f"{__name__}.traffic")

_RULE = "═" * 29


def _json_or_raw(content: str | None) -> str | None:
    if content is None:
        return None
    try:
        return json.dumps(json.loads(content), indent=4, ensure_ascii=False)
    except ValueError:
        return content


def _decode(body: bytes | None, charset: str | None = None) -> str | None:
    if body is None:
        return None
    return body.decode(charset or "utf-8", errors="replace")


def format_traffic(
    url: Any,
    request_headers: Iterable[tuple[str, str]],
    request_body: str | None,
    response_headers: Iterable[tuple[str, str]],
    response_body: str | None,
) -> list[str]:
    """Format one request/response exchange as boxed log lines."""
    lines = [
        f"╔{'═' * 74}",
        f"║ Request({url})",
        f"╠{_RULE}>Request Header<{_RULE}",
        *(f"║ {name}: {value}" for name, value in request_headers),
        f"╠{_RULE}>Request Body<{_RULE}",
    ]
    lines.extend(_body_lines(_json_or_raw(request_body)))
    lines.append(f"╠{_RULE}>Response header<{_RULE}")
    lines.extend(f"║ {name}: {value}" for name, value in response_headers)
    lines.append(f"╠{_RULE}>Response Body<{_RULE}")
    lines.extend(_body_lines(_json_or_raw(response_body)))
    lines.append(f"╚{'═' * 74}")
    return lines


def _body_lines(body: str | None) -> list[str]:
    if body is None:
        return ["║ null"]
    return [f"║ {line}" for line in body.splitlines()] or ["║ "]


# ******************************************************************************


async def _on_request_start(_: ClientSession, ctx: SimpleNamespace, __: TraceRequestStartParams) -> None:
    ctx.chunks = []


async def _on_request_chunk_sent(_: ClientSession, ctx: SimpleNamespace, params: TraceRequestChunkSentParams) -> None:
    ctx.chunks.append(params.chunk)


async def _on_request_end(_: ClientSession, ctx: SimpleNamespace, params: TraceRequestEndParams) -> None:
    try:
        chunks: list[bytes] = getattr(ctx, "chunks", [])
        response = params.response
        # body is cached by the response, later reads by the caller still work
        response_body = await response.read()
        lines = format_traffic(
            params.url,
            params.headers.items(),
            _decode(b"".join(chunks)) if chunks else None,
            response.headers.items(),
            _decode(response_body, response.get_encoding()) if response_body else None,
        )
        for line in lines:
            _LOGGER_TRAFFIC.info(line)
    except Exception:
        _LOGGER.exception(utils.default_exception_str_builder(info="during logging the traffic"))


async def _on_request_exception(_: ClientSession, __: SimpleNamespace, params: TraceRequestExceptionParams) -> None:
    _LOGGER_TRAFFIC.error(f"<-- HTTP FAILED: [{params.url}] - {params.exception}")


def create_trace_config() -> TraceConfig:
    """Create trace config which logs every request/response exchange."""
    trace_config = TraceConfig()
    trace_config.on_request_start.append(_on_request_start)
    trace_config.on_request_chunk_sent.append(_on_request_chunk_sent)
    trace_config.on_request_end.append(_on_request_end)
    trace_config.on_request_exception.append(_on_request_exception)
    return trace_config
