from typing import Any, Optional


def envelope(
    data: Any = None,
    message: Optional[str] = None,
    success: bool = True,
) -> dict:
    """Build the ``{success, message?, data?}`` body every endpoint returns."""
    body = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_envelope(message: str) -> dict:
    return envelope(message=message, success=False)
