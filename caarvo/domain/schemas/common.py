"""Shared schema base, field types and response envelope helpers."""

import math
import re
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

from caarvo.core.clock import as_utc

PHONE_PATTERN = re.compile(r"^\+91[6-9]\d{9}$")


def _check_phone(value: str) -> str:
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValueError("Please enter a valid Indian phone number starting with +91")
    return value


Phone = Annotated[str, AfterValidator(_check_phone)]

# Naive values (SQLite, clients omitting an offset) are read as UTC
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """camelCase on the wire; snake_case (or camelCase) accepted on input."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "use_enum_values": True,
    }


def envelope(data: Any = None, message: Optional[str] = None, **meta: Any) -> dict:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(meta)
    return body


def page_meta(total: int, page: int, limit: int, count: int) -> dict:
    return {
        "count": count,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "currentPage": page,
    }
