"""
Reply inspection shared by the bus clients.

Collaborators answer either with their payload or with an error object,
bare (`{"status": 400, "message": ...}`) or wrapped
(`{"success": false, "error": {...}}`); `err` is accepted for `error`.
"""

from typing import Any, Optional, Tuple


def extract_error(reply: Any) -> Optional[Tuple[int, str]]:
    """Return (status, message) when the reply is an error, else None"""
    if not isinstance(reply, dict):
        return None

    error = reply.get("error", reply.get("err"))
    if isinstance(error, dict):
        return _status_of(error), str(error.get("message") or reply.get("message") or "error")
    if isinstance(error, str):
        return _status_of(reply), error

    if reply.get("success") is False:
        return _status_of(reply), str(reply.get("message") or "error")
    if isinstance(reply.get("status"), int) and "message" in reply and len(reply) <= 3:
        return _status_of(reply), str(reply["message"])
    return None


def _status_of(obj: dict) -> int:
    try:
        return int(obj.get("status") or obj.get("statusCode") or 500)
    except (TypeError, ValueError):
        return 500
