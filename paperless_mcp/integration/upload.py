"""Document upload pipeline for ``POST /api/documents/post_document/``.

Each attempt opens its own file handle in a single ``with`` block and hands
it to ``httpx`` as the ``document`` multipart part, so the body is streamed
in chunks and the handle is closed exactly once when the attempt ends,
whether it succeeded, will be retried, or aborted.

The multipart encoder in ``httpx`` only accepts synchronous file objects, so
each chunk is read with a blocking ``read()`` on the event loop between
network writes. Reads from local disk are the only blocking step; the
network writes and backoff sleeps are awaited.

Retry classification:
- retryable: ``OSError``, ``httpx.TransportError``, 5xx and 429 responses
- fatal: the per-attempt hard timeout, any other exception, any other 4xx

Backoff: 2s, 4s between attempts (``2 ** attempt``).
"""

from __future__ import annotations

import asyncio
import io
import logging
from contextlib import AbstractContextManager
from typing import IO, Any, Callable

import httpx

from paperless_mcp.integration.normalizer import normalize_task_id
from paperless_mcp.integration.result import ApiError, ApiResult, Failure
from paperless_mcp.integration.transport import (
    HttpTransport,
    TransientResponseError,
    is_transient_status,
)
from paperless_mcp.models.documents import DocumentUploadMetadata
from paperless_mcp.resilience.retry import RetryExhaustedError, retry_async
from paperless_mcp.validators.params import resolve_upload_path

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/documents/post_document/"


def is_retryable_upload_error(exc: BaseException) -> bool:
    """IO and network failures are retried; the hard timeout is not."""
    if isinstance(exc, TimeoutError):
        return False
    return isinstance(exc, (OSError, httpx.TransportError, TransientResponseError))


class UploadPipeline:
    """Multipart uploads with their own retry loop.

    Parameters
    ----------
    transport:
        Shared HTTP transport. Called with ``retry=False`` so only this
        pipeline's loop decides about retries.
    max_retries:
        Total attempts per upload (default 3).
    timeout_seconds:
        Hard bound on each attempt (default 300 = 5 min).
    """

    def __init__(
        self,
        transport: HttpTransport,
        *,
        max_retries: int = 3,
        timeout_seconds: float = 300.0,
    ) -> None:
        self._transport = transport
        self._max_retries = max_retries
        self._timeout_seconds = timeout_seconds

    async def upload_from_path(
        self, path: str, metadata: DocumentUploadMetadata | None = None
    ) -> ApiResult[str]:
        """Upload a file from the local filesystem.

        Raises
        ------
        ValidationError
            If the path is relative after ``~`` expansion.
        NotFoundError
            If no file exists at the path.
        """
        resolved = resolve_upload_path(path)
        return await self._upload(
            lambda: open(resolved, "rb"),
            resolved.name,
            resolved.stat().st_size,
            metadata or DocumentUploadMetadata(),
        )

    async def upload_from_bytes(
        self,
        content: bytes,
        filename: str,
        metadata: DocumentUploadMetadata | None = None,
    ) -> ApiResult[str]:
        """Upload an in-memory payload under ``filename``."""
        return await self._upload(
            lambda: io.BytesIO(content),
            filename,
            len(content),
            metadata or DocumentUploadMetadata(),
        )

    async def _upload(
        self,
        open_stream: Callable[[], AbstractContextManager[IO[bytes]]],
        filename: str,
        file_size: int,
        metadata: DocumentUploadMetadata,
    ) -> ApiResult[str]:
        fields = metadata.form_fields()
        log_extra: dict[str, Any] = {"file_name": filename, "file_size": file_size}

        async def attempt(number: int) -> httpx.Response:
            with open_stream() as stream:
                response = await asyncio.wait_for(
                    self._transport.send(
                        "POST",
                        UPLOAD_PATH,
                        data=fields,
                        files={"document": (filename, stream)},
                        timeout=self._timeout_seconds,
                        retry=False,
                    ),
                    timeout=self._timeout_seconds,
                )
            if is_transient_status(response.status_code):
                raise TransientResponseError(response)
            return response

        def on_retry(number: int, exc: BaseException, delay: float) -> None:
            logger.warning(
                "Upload attempt %d/%d failed for %s: %s, retrying in %ds",
                number,
                self._max_retries,
                filename,
                exc,
                delay,
                extra={
                    **log_extra,
                    "attempt": number,
                    "max_attempts": self._max_retries,
                    "backoff_seconds": delay,
                },
            )

        try:
            response = await retry_async(
                attempt,
                is_retryable=is_retryable_upload_error,
                max_attempts=self._max_retries,
                on_retry=on_retry,
            )
        except RetryExhaustedError as exc:
            logger.error(
                "Upload of %s failed after %d attempts",
                filename,
                exc.attempts,
                extra=log_extra,
            )
            return Failure(_exhausted_error(exc))
        except TimeoutError:
            logger.error(
                "Upload of %s exceeded %.0fs hard timeout",
                filename,
                self._timeout_seconds,
                extra=log_extra,
            )
            return Failure(
                ApiError(0, f"Upload failed: timed out after {self._timeout_seconds:.0f}s")
            )
        except Exception as exc:
            logger.exception("Upload of %s aborted: %s", filename, exc, extra=log_extra)
            return Failure(ApiError(0, f"Upload failed: {exc}"))

        result = normalize_task_id(response)
        if isinstance(result, Failure):
            logger.warning(
                "Paperless rejected upload of %s",
                filename,
                extra={
                    **log_extra,
                    "status_code": response.status_code,
                    "response_body": result.error.response_body,
                },
            )
        else:
            logger.info(
                "Uploaded %s",
                filename,
                extra={**log_extra, "task_id": result.value},
            )
        return result


def _exhausted_error(exc: RetryExhaustedError) -> ApiError:
    message = f"Upload failed after {exc.attempts} attempts"
    last = exc.last_error
    if isinstance(last, TransientResponseError):
        return ApiError(last.response.status_code, message, last.response.text)
    return ApiError(0, message, str(last) or type(last).__name__)
