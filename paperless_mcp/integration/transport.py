"""HTTP transport to the Paperless-ngx REST API.

Owns the single ``httpx.AsyncClient`` shared by every tool call. The client
is configured once (base URL, ``Authorization: Token <token>``, versioned
``Accept`` header, timeout) and never mutated afterwards.

Transient failures are retried through ``retry_async``:
network errors (``httpx.TransportError``), 5xx and 429. Other statuses are
returned to the caller on the first attempt.

SECURITY: Never logs the API token or the Authorization header.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from paperless_mcp.config.settings import PaperlessSettings
from paperless_mcp.logging_config import truncate_body
from paperless_mcp.resilience.retry import RetryExhaustedError, retry_async

logger = logging.getLogger(__name__)


def is_transient_status(status_code: int) -> bool:
    """5xx and 429 are worth retrying; every other status is final."""
    return status_code == 429 or 500 <= status_code <= 599


class TransientResponseError(Exception):
    """Internal signal carrying a retryable HTTP response between attempts."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(f"HTTP {response.status_code}")


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.TransportError, TransientResponseError))


class HttpTransport:
    """Retrying wrapper around a shared ``httpx.AsyncClient``.

    Parameters
    ----------
    settings:
        Frozen server settings providing base URL, token and timeouts.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        settings: PaperlessSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._max_retries = settings.max_retries
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            headers={
                "Authorization": f"Token {settings.api_token}",
                "Accept": f"application/json; version={settings.api_version}",
            },
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        timeout: float | None = None,
        retry: bool = True,
    ) -> httpx.Response:
        """Issue one logical request, retrying transient failures.

        Returns the final response whatever its status. When retries run out
        on a transient status the last response is returned; when they run
        out on a network error that ``httpx.TransportError`` is raised.
        """
        max_attempts = self._max_retries + 1 if retry else 1

        async def attempt(number: int) -> httpx.Response:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                files=files,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
            if is_transient_status(response.status_code):
                self._log_failed_attempt(method, path, number, max_attempts, response=response)
                raise TransientResponseError(response)
            return response

        def on_retry(number: int, exc: BaseException, delay: float) -> None:
            if isinstance(exc, httpx.TransportError):
                self._log_failed_attempt(method, path, number, max_attempts, error=exc)
            logger.debug("Retrying %s %s in %.0fs", method, path, delay)

        try:
            return await retry_async(
                attempt,
                is_retryable=_is_retryable,
                max_attempts=max_attempts,
                on_retry=on_retry,
            )
        except RetryExhaustedError as exc:
            last = exc.last_error
            if isinstance(last, TransientResponseError):
                return last.response
            if isinstance(last, httpx.TransportError):
                self._log_failed_attempt(method, path, exc.attempts, max_attempts, error=last)
            raise last from None

    def _log_failed_attempt(
        self,
        method: str,
        path: str,
        attempt: int,
        max_attempts: int,
        *,
        response: httpx.Response | None = None,
        error: BaseException | None = None,
    ) -> None:
        extra: dict[str, Any] = {
            "method": method,
            "path": path,
            "attempt": attempt,
            "max_attempts": max_attempts,
        }
        if response is not None:
            extra["status_code"] = response.status_code
            extra["response_body"] = truncate_body(response.text)
            reason = f"HTTP {response.status_code}"
        else:
            extra["error_reason"] = repr(error)
            reason = type(error).__name__
        logger.warning(
            "Paperless request failed (attempt %d/%d): %s %s -> %s",
            attempt,
            max_attempts,
            method,
            path,
            reason,
            extra=extra,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
