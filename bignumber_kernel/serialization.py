"""
Serialization -- plain-object and JSON text forms of mapped instances.

BigNumber values always leave through BigNumber.render(), the same routine the
column type uses on the way to storage, so the stored text, ``to_plain()`` and
``to_json()`` agree byte-for-byte.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import inspect

from bignumber_kernel.domain.values import BigNumber


def plain_value(value: Any) -> Any:
    """JSON-safe form of a single column value."""
    if isinstance(value, BigNumber):
        return value.render()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def to_plain(obj: Any) -> dict[str, Any]:
    """Column key -> JSON-safe value for every mapped column of obj."""
    mapper = inspect(type(obj))
    return {
        prop.key: plain_value(getattr(obj, prop.key))
        for prop in mapper.column_attrs
    }


class BigNumberJSONEncoder(json.JSONEncoder):
    """Render BigNumber (and UUID, datetime, Decimal) anywhere in a structure."""

    def default(self, obj: Any) -> Any:
        converted = plain_value(obj)
        if converted is obj:
            return super().default(obj)
        return converted


def to_json(obj: Any, **kwargs: Any) -> str:
    """JSON text of to_plain(obj); kwargs go to json.dumps."""
    return json.dumps(to_plain(obj), cls=BigNumberJSONEncoder, **kwargs)
