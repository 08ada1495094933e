from __future__ import annotations

import dataclasses
import sys
import typing
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Mapping
    from typing import Any

if sys.version_info >= (3, 10):  # pragma: no cover
    from types import UnionType

    _UNION_TYPES: tuple[Any, ...] = (Union, UnionType)
else:  # pragma: no cover
    _UNION_TYPES = (Union,)


def unwrap_optional(hint: Any) -> tuple[Any, bool]:
    """Split ``Optional[X]`` (or ``X | None``) into ``(X, True)``.

    Any other hint, including unions of several real types, is returned as
    ``(hint, False)``.
    """
    if typing.get_origin(hint) in _UNION_TYPES:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1 and len(typing.get_args(hint)) == 2:
            return args[0], True
    return hint, False


def list_item_type(hint: Any) -> Any | None:
    """Return ``X`` for ``list[X]`` / ``List[X]``, otherwise None."""
    if typing.get_origin(hint) is list:
        args = typing.get_args(hint)
        if len(args) == 1:
            return args[0]
    return None


def is_subclass(hint: Any, cls: type) -> bool:
    # Parametrized generics such as list[int] pass isinstance(..., type)
    # before Python 3.11 but cannot go through issubclass().
    return isinstance(hint, type) and typing.get_origin(hint) is None and issubclass(hint, cls)


class FieldDescriptor:
    """One destination field of a record.

    Wraps a :class:`dataclasses.Field` together with its resolved type hint
    and gives get/set access to the value on a record instance.
    """

    def __init__(self, name: str, hint: Any, metadata: Mapping[str, Any]) -> None:
        self._name = name
        self._hint = hint
        self._metadata = metadata

    @property
    def name(self) -> str:
        """The attribute name declared on the record class."""
        return self._name

    @property
    def hint(self) -> Any:
        """The resolved type hint of the field."""
        return self._hint

    @property
    def metadata(self) -> Mapping[str, Any]:
        return self._metadata

    def tag(self, key: str) -> Any | None:
        """Return the metadata entry stored under `key`, or None if the field
        carries no such entry.
        """
        return self._metadata.get(key)

    def get(self, record: object) -> Any:
        return getattr(record, self._name)

    def set(self, record: object, value: Any) -> None:
        setattr(record, self._name, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, hint={self.hint!r})"


def record_fields(record_type: type) -> list[FieldDescriptor]:
    """Enumerate the fields of a dataclass, in declaration order.

    String annotations (``from __future__ import annotations``) are resolved
    with :func:`typing.get_type_hints`, so every referenced name must be
    importable from the record's module.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise TypeError(f"cannot decode form data into {record_type!r}: not a dataclass")

    params = getattr(record_type, "__dataclass_params__", None)
    if params is not None and params.frozen:
        raise TypeError(f"cannot decode form data into {record_type.__name__}: dataclass is frozen")

    hints = typing.get_type_hints(record_type)
    return [FieldDescriptor(f.name, hints.get(f.name, f.type), f.metadata) for f in dataclasses.fields(record_type)]
