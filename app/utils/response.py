from typing import Any

from pydantic import BaseModel


def _plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, list):
        return [_plain(d) for d in data]
    return data


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": _plain(data), "message": message}


def error_response(message: str, data: Any = None) -> dict:
    return {"status": "error", "data": _plain(data), "message": message}
