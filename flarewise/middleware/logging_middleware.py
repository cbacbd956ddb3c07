"""
FastAPI middleware for logging API requests and responses.

Pure ASGI middleware, so streamed and file responses pass through untouched.

Logged per request:
- method, path, client, status code and processing time
- JSON request/response bodies with health notes and secrets masked
- non-JSON bodies (such as CSV exports) only by size
"""

import json
import logging
import time
from typing import List, Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_BODY_LOG_LENGTH = 5000


def _body_for_log(data: bytes, content_type: Optional[str]) -> Optional[str]:
    """Masked, truncated JSON text, or a size note for other content."""
    if not data:
        return None
    if content_type and "json" not in content_type:
        return f"<{len(data)} bytes {content_type}>"
    text = data.decode("utf-8", errors="ignore")
    try:
        payload = filter_sensitive_data(json.loads(text))
        text = json.dumps(payload, ensure_ascii=False)
    except json.JSONDecodeError:
        pass
    return truncate_large_data(text, max_length=MAX_BODY_LOG_LENGTH)


def _error_reason(body_text: Optional[str]) -> Optional[str]:
    """The `detail` of an error response, if there is one."""
    if not body_text:
        return None
    try:
        payload = json.loads(body_text)
    except json.JSONDecodeError:
        return truncate_large_data(body_text, max_length=500)
    if isinstance(payload, dict) and payload.get("detail"):
        return truncate_large_data(str(payload["detail"]), max_length=500)
    return None


def _headers(raw) -> dict:
    return {
        k.decode("utf-8", errors="ignore").lower(): v.decode("utf-8", errors="ignore")
        for k, v in raw
    }


class RequestLoggingMiddleware:
    """Pure ASGI middleware to log API requests and responses."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[List[str]] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths that are not logged (defaults to "/" and "/health")
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        request_headers = _headers(scope.get("headers", []))
        client = scope.get("client")

        request_chunks: List[bytes] = []
        response_chunks: List[bytes] = []
        status_code = 0
        response_type: Optional[str] = None

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message):
            nonlocal status_code, response_type
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                response_type = _headers(message.get("headers", [])).get("content-type")
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "method": method,
                "path": path,
                "client": client[0] if client else None,
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {"method": method, "path": path, "duration_ms": duration_ms}}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = _body_for_log(b"".join(request_chunks), request_headers.get("content-type"))
        response_body = _body_for_log(b"".join(response_chunks), response_type)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Request body: {request_body or '-'}")
            logger.debug(f"Response body: {response_body or '-'}")

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        error_reason = _error_reason(response_body) if status_code >= 400 else None
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "request_body": request_body,
                "response_body": response_body,
                "error_reason": error_reason,
            }}
        )
