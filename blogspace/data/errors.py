"""
BlogSpace — Backend Error Translation
======================================

What:  Turns a failed backend HTTP response into a BackendError.
How:   The REST service answers `{"message", "code", "details", "hint"}`; the
       auth service answers `{"msg"}`, `{"error", "error_description"}` or
       `{"message"}` depending on the endpoint and version. All shapes are
       accepted; a body that is not JSON falls back to the reason phrase.
"""

from typing import Any, Dict

import httpx

from blogspace.exceptions import BackendError


def _body(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def error_from_response(response: httpx.Response) -> BackendError:
    """Build a BackendError from a non-2xx response."""
    body = _body(response)
    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or response.reason_phrase
        or f"Backend request failed with status {response.status_code}"
    )
    code = body.get("code") or body.get("error_code")
    return BackendError(
        message=str(message),
        status_code=response.status_code,
        code=str(code) if code is not None else None,
        context={
            "method": response.request.method,
            "path": response.request.url.path,
            "details": body.get("details"),
            "hint": body.get("hint"),
        },
    )
