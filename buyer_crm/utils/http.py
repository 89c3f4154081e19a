"""Shared plumbing for the Vercel serverless handlers in api/."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ValidationError

from buyer_crm.models.caller import Caller
from buyer_crm.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    BuyerCRMError,
    CSVImportError,
    NotFoundError,
    RequestError,
    format_validation_error,
)
from buyer_crm.utils.logging import correlation_context, get_structured_logger, mask_sensitive_data
from buyer_crm.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


class ApiResponse:
    """Status, body and headers produced by an endpoint method."""

    def __init__(self, status: int, body: bytes, content_type: str, headers: Optional[dict] = None):
        self.status = status
        self.body = body
        self.content_type = content_type
        self.headers = headers or {}


def to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    if isinstance(payload, (list, tuple)):
        return [to_jsonable(item) for item in payload]
    return payload


def json_response(payload: Any, status: int = 200) -> ApiResponse:
    body = json.dumps(to_jsonable(payload)).encode("utf-8")
    return ApiResponse(status, body, "application/json")


def csv_response(content: str, filename: Optional[str] = None) -> ApiResponse:
    headers = {}
    if filename:
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return ApiResponse(200, content.encode("utf-8"), "text/csv; charset=utf-8", headers)


def error_status(error: Exception) -> int:
    """HTTP status for an exception raised by a service."""
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, (ValidationError, CSVImportError)):
        return 422
    if isinstance(error, RequestError):
        return 400
    return 500


Operation = Callable[[Optional[Caller]], Awaitable[ApiResponse]]


class ApiHandler(BaseHTTPRequestHandler):
    """
    Base handler: resolves the caller from the bearer token, runs the async
    endpoint method for the HTTP verb and maps service errors to statuses.
    
    Subclasses define any of ``get``/``post``/``patch``/``delete`` as
    ``async def method(self, caller) -> ApiResponse``.
    """

    requires_auth = True

    def do_GET(self):
        self._dispatch("get")

    def do_POST(self):
        self._dispatch("post")

    def do_PATCH(self):
        self._dispatch("patch")

    def do_DELETE(self):
        self._dispatch("delete")

    def log_message(self, format, *args):
        logger.debug("HTTP request", request_line=format % args)

    # Request helpers

    def query_params(self) -> dict[str, str]:
        parsed = parse_qs(urlparse(self.path).query)
        return {key: values[-1] for key, values in parsed.items()}

    def require_param(self, name: str) -> str:
        value = self.query_params().get(name)
        if not value:
            raise RequestError(f"Missing query parameter: {name}")
        return value

    def read_body(self) -> str:
        content_length = int(self.headers.get("Content-Length", 0) or 0)
        if content_length <= 0:
            return ""
        try:
            return self.rfile.read(content_length).decode("utf-8-sig")
        except UnicodeDecodeError:
            raise RequestError("Request body must be UTF-8")

    def read_json(self) -> dict:
        raw_body = self.read_body()
        if not raw_body:
            return {}
        try:
            body = json.loads(raw_body)
        except json.JSONDecodeError as e:
            raise RequestError(f"Invalid JSON body: {e}")
        if not isinstance(body, dict):
            raise RequestError("JSON body must be an object")
        return body

    def bearer_token(self) -> Optional[str]:
        header = self.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    # Dispatch

    def _dispatch(self, method: str) -> None:
        LoggingConfig.ensure_configured()
        operation: Optional[Operation] = getattr(self, method, None)
        
        with correlation_context(self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)) as correlation_id:
            if operation is None:
                response = json_response({"error": "method not allowed"}, status=405)
            else:
                response = self._execute(operation, method)
            self._send(response, correlation_id)

    def _execute(self, operation: Operation, method: str) -> ApiResponse:
        async def run() -> ApiResponse:
            caller = None
            if self.requires_auth:
                from buyer_crm.services.identity import resolve_caller
                caller = await resolve_caller(self.bearer_token())
            return await operation(caller)
        
        try:
            return asyncio.run(run())
        except ValidationError as e:
            return json_response({"error": format_validation_error(e)}, status=422)
        except BuyerCRMError as e:
            status = error_status(e)
            if status >= 500:
                logger.error("Request failed", method=method.upper(), path=self.path, error=mask_sensitive_data(str(e)))
                return json_response({"error": "internal server error"}, status=status)
            logger.info("Request rejected", method=method.upper(), path=self.path, status=status)
            return json_response({"error": str(e)}, status=status)
        except Exception as e:
            logger.exception("Unhandled error", method=method.upper(), path=self.path, error=mask_sensitive_data(str(e)))
            return json_response({"error": "internal server error"}, status=500)

    def _send(self, response: ApiResponse, correlation_id: str) -> None:
        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        self.send_header("Content-Length", str(len(response.body)))
        self.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, correlation_id)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(response.body)
