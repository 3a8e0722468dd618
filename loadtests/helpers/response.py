"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages. Every
failure has the shape ``{"error": KIND, "messages": {field: [msg, ...]}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON: raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "error" in body:
        messages = body.get("messages") or {}
        if isinstance(messages, dict) and messages:
            detail = " | ".join(f"{field}: {'; '.join(map(str, msgs))}" for field, msgs in messages.items())
            return f"{body['error']} — {detail}"
        return str(body["error"])

    # Unknown shape: stringified and truncated
    return str(body)[:300]


def error_kind(response: Response) -> str | None:
    """The ``error`` kind of a failed response, or None when the body carries none."""
    try:
        body = response.json()
    except Exception:
        return None
    return body.get("error") if isinstance(body, dict) else None
