import json
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel


class SerializationError(ValueError):
    """A cached payload could not be decoded."""


class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that understands the value types stored on job postings."""

    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")

        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()

        if isinstance(obj, Decimal):
            return float(obj)

        if isinstance(obj, uuid.UUID):
            return str(obj)

        if isinstance(obj, Enum):
            return obj.value

        if isinstance(obj, set):
            return list(obj)

        return super().default(obj)


def serialize(data: Any) -> str:
    """Serialize data to the JSON string stored in the cache."""
    return json.dumps(data, cls=EnhancedJSONEncoder, separators=(",", ":"))


def deserialize(data: Union[str, bytes, None]) -> Any:
    """
    Decode a cached JSON payload.

    Raises:
        SerializationError: payload is not valid UTF-8 JSON
    """
    if data is None:
        return None
    try:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SerializationError(str(e)) from e
