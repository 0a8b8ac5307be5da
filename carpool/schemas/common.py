import math
from typing import Any

from pydantic import BaseModel


# ─── Errors ────────────────────────────────────────────────────────────────────
class ErrorDetail(BaseModel):
    field:   str
    message: str


class ErrorBody(BaseModel):
    code:    str
    details: list[ErrorDetail] | None = None
    field:   str | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response: {success: false, message, error}."""
    success: bool = False
    message: str
    error:   ErrorBody


# ─── Envelopes ─────────────────────────────────────────────────────────────────
class PageMeta(BaseModel):
    page:       int
    limit:      int
    total:      int
    totalPages: int
    hasNext:    bool
    hasPrev:    bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PageMeta":
        pages = math.ceil(total / limit) if limit else 0
        return cls(page=page, limit=limit, total=total, totalPages=pages,
                   hasNext=page < pages, hasPrev=page > 1)


def success_response(message: str, data: Any = None) -> dict:
    return {"success": True, "message": message, "data": data}


def paginated_response(message: str, data: list, total: int, page: int, limit: int) -> dict:
    """success_response plus a `meta` block for search listings."""
    envelope = success_response(message, data)
    envelope["meta"] = PageMeta.build(total, page, limit).model_dump()
    return envelope
