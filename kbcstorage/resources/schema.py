import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from kbcstorage.exceptions import ConfigurationError


class FieldType(Enum):
    STRING = 'string'
    BOOL = 'bool'
    LIST = 'list'

    def zero(self) -> Any:
        r"""The value an unset field reads as."""
        if self == FieldType.STRING:
            return ''
        if self == FieldType.BOOL:
            return False
        return []


@dataclass(frozen=True)
class SchemaField:
    type: FieldType
    required: bool = False
    # A change to this field cannot be applied in place; the resource has
    # to be destroyed and re-created:
    force_new: bool = False

    def validate(self, key: str, value: Any) -> None:
        ok = {
            FieldType.STRING: lambda v: isinstance(v, str),
            FieldType.BOOL: lambda v: isinstance(v, bool),
            FieldType.LIST: lambda v: (isinstance(v, list) and all(
                isinstance(e, str) for e in v)),
        }[self.type](value)
        if not ok:
            raise ConfigurationError(
                f"Field '{key}' expects a {self.type.value} value, got "
                f"{value!r}")


Schema = Mapping[str, SchemaField]


class ResourceData:
    r"""The state of one resource instance: an opaque ID plus one value per
    schema field. An empty ID means the resource does not exist remotely.

    Values are validated against the schema on assignment; reading an unset
    field returns the zero value of its type.
    """
    def __init__(
        self,
        schema: Schema,
        values: Optional[Mapping[str, Any]] = None,
        id: str = '',
    ) -> None:
        self._schema = schema
        self._values: Dict[str, Any] = {}
        self._id = id
        for key, value in (values or {}).items():
            self.set(key, value)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, id: str) -> None:
        self._id = id

    def get(self, key: str) -> Any:
        field = self._field(key)
        if key not in self._values:
            return field.type.zero()
        return copy.copy(self._values[key])

    def set(self, key: str, value: Any) -> None:
        field = self._field(key)
        if value is None:
            self._values.pop(key, None)
            return
        field.validate(key, value)
        self._values[key] = copy.copy(value)

    def validate(self) -> None:
        r"""Raises :class:`ConfigurationError` if a required field is
        unset or empty.
        """
        missing = [
            key for key, field in self._schema.items()
            if field.required and not self._values.get(key)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required field(s): {', '.join(sorted(missing))}")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'id': self._id}
        for key in self._schema:
            out[key] = self.get(key)
        return out

    def _field(self, key: str) -> SchemaField:
        try:
            return self._schema[key]
        except KeyError:
            raise ConfigurationError(f"Unknown field '{key}'") from None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"


def requires_replacement(
    schema: Schema,
    old: Mapping[str, Any],
    new: Mapping[str, Any],
) -> List[str]:
    r"""Returns the (sorted) force-new fields whose value differs between
    ``old`` and ``new``. Unset fields compare equal to their zero value.
    """
    changed = []
    for key, field in schema.items():
        if not field.force_new:
            continue
        before = old.get(key)
        after = new.get(key)
        if before is None:
            before = field.type.zero()
        if after is None:
            after = field.type.zero()
        if before != after:
            changed.append(key)
    return sorted(changed)
