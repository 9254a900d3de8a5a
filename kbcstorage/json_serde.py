import json
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from kbcstorage.exceptions import DecodeError

T = TypeVar('T')


def from_json(obj: Any, cls: Type[T]) -> T:
    r"""Decodes ``obj`` (a JSON string or already-parsed JSON value) into
    ``cls``, which may be a pydantic dataclass or any type understood by
    :class:`pydantic.TypeAdapter`.

    Raises:
        DecodeError: if ``obj`` is not valid JSON or does not validate
            against ``cls``.
    """
    raw = obj if isinstance(obj, str) else None
    try:
        if isinstance(obj, str):
            obj = json.loads(obj)
        return TypeAdapter(cls).validate_python(obj)
    except (json.JSONDecodeError, ValidationError) as e:
        name = getattr(cls, '__name__', str(cls))
        raise DecodeError(f"Unable to decode {name}: {e}", body=raw) from e
