"""Test helper functions."""

import json
from io import BytesIO
from typing import Any, Dict, Optional


class MockSocket:
    """Socket double feeding a raw HTTP request and capturing the response bytes."""

    def __init__(self, raw_request: bytes):
        self.raw_request = raw_request
        self.sent = BytesIO()

    def makefile(self, *args, **kwargs):
        return BytesIO(self.raw_request)

    def sendall(self, data):
        self.sent.write(data)

    def close(self):
        pass


def build_raw_request(
    method: str,
    path: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    if body is None:
        payload = b""
    elif isinstance(body, (dict, list)):
        payload = json.dumps(body).encode("utf-8")
    else:
        payload = body.encode("utf-8") if isinstance(body, str) else body
    
    lines = [f"{method} {path} HTTP/1.1", "Host: localhost"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    if payload:
        lines.append(f"Content-Length: {len(payload)}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8") + payload


def call_handler(
    handler_class,
    method: str,
    path: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    token: Optional[str] = None,
) -> Dict[str, Any]:
    """Run a handler class against one request; return status, headers and body."""
    headers = dict(headers or {})
    if token:
        headers["Authorization"] = f"Bearer {token}"
    
    sock = MockSocket(build_raw_request(method, path, body, headers))
    handler_class(sock, ("127.0.0.1", 8000), None)
    
    raw = sock.sent.getvalue().decode("utf-8")
    head, _, response_body = raw.partition("\r\n\r\n")
    status_line, *header_lines = head.split("\r\n")
    response_headers = {}
    for line in header_lines:
        name, _, value = line.partition(":")
        response_headers[name.strip().lower()] = value.strip()
    
    return {
        "status": int(status_line.split(" ")[1]),
        "headers": response_headers,
        "body": response_body,
    }
