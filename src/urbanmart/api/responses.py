"""The JSON envelope every endpoint answers with."""

from typing import Any


def ok(data: Any = None, message: str = "Success") -> dict:
    return {"success": True, "message": message, "data": data}


def error(message: str) -> dict:
    return {"success": False, "error": message}
