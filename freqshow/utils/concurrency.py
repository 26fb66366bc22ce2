"""Concurrency helpers for optional enrichment fan-out.

Once a primary record exists, the catalog service dispatches its secondary
lookups (biography and discography for artists, track list and review for
albums) at the same time.  :func:`gather_enrichments` runs them under a
per-call timeout, waits for every one of them to settle, and hands back a
result per name with failures already logged and replaced by ``None``.

Cancellation is never absorbed: if the caller's task is cancelled, or an
enrichment itself ends in ``CancelledError``, the error propagates.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable

import structlog

from freqshow.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


async def _with_timeout(awaitable: Awaitable[Any], timeout: float | None) -> Any:
    if timeout is None or timeout <= 0:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout)


async def gather_enrichments(
    calls: dict[str, Awaitable[Any]],
    timeout: float | None = None,
    logger: structlog.BoundLogger | None = None,
    **log_context: Any,
) -> dict[str, Any]:
    """Run named optional lookups concurrently and collect their outcomes.

    Parameters
    ----------
    calls:
        Mapping of enrichment name to the awaitable producing its value.
    timeout:
        Per-call timeout in seconds.  ``None`` or a non-positive value
        disables it.
    logger:
        Structured logger used for failure warnings.
    log_context:
        Extra key/value pairs attached to every failure log line
        (e.g. ``artist_id=...``).

    Returns
    -------
    dict[str, Any]
        The same keys as *calls*; each value is the lookup's result, or
        ``None`` when it raised or timed out.
    """
    if logger is None:
        logger = _logger

    names = list(calls)
    raw_results = await asyncio.gather(
        *(_with_timeout(calls[name], timeout) for name in names),
        return_exceptions=True,
    )

    outcomes: dict[str, Any] = {}
    for name, result in zip(names, raw_results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        if isinstance(result, Exception):
            logger.warning(
                f"{name}_enrichment_failed",
                error=str(result) or type(result).__name__,
                error_type=type(result).__name__,
                **log_context,
            )
            outcomes[name] = None
        else:
            outcomes[name] = result
    return outcomes
