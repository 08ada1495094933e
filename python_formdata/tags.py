from __future__ import annotations

import enum
from typing import TYPE_CHECKING, NamedTuple

from python_multipart.multipart import File

from .exceptions import TagError
from .fields import is_subclass, list_item_type, unwrap_optional

if TYPE_CHECKING:  # pragma: no cover
    from typing import Any

    from .fields import FieldDescriptor


#: Default metadata key under which a field declares its wire name.
TAG_NAME = "formdata"

#: Wire name that excludes a field from decoding.
EXCLUDED = "-"


class FileKind(enum.IntEnum):
    """How a file field receives the uploaded parts submitted under its
    wire name.
    """

    NONE = 0
    SINGLE = 1
    LIST = 2


class FieldTag(NamedTuple):
    name: str
    is_file: bool


def file_kind(hint: Any) -> FileKind:
    """Classify a type hint as a single file handle, a list of file handles,
    or neither.  The decision depends on the declared type only.
    """
    inner, _ = unwrap_optional(hint)
    if is_subclass(inner, File):
        return FileKind.SINGLE

    item = list_item_type(hint)
    if item is not None:
        item, _ = unwrap_optional(item)
        if is_subclass(item, File):
            return FileKind.LIST

    return FileKind.NONE


def get_field_tag(field: FieldDescriptor, tag_name: str = TAG_NAME) -> FieldTag:
    """Resolve the wire name of a record field and whether it is a file field.

    A field without a `tag_name` entry in its metadata is matched by its own
    attribute name.  The entry may hold exactly one name; ``""`` and the
    exclusion marker ``"-"`` are both taken verbatim.  Anything with a comma
    in it is a declaration error and raises :class:`TagError`.
    """
    tag = field.tag(tag_name)
    if tag is None:
        name = field.name
    elif not isinstance(tag, str):
        raise TagError(field.name, f"{tag_name} tag must be a string, not {type(tag).__name__}")
    else:
        segments = tag.split(",")
        if len(segments) > 1:
            raise TagError(field.name, "too many tags")
        name = segments[0]

    return FieldTag(name=name, is_file=file_kind(field.hint) is not FileKind.NONE)
