from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from typing import TYPE_CHECKING

from .exceptions import CoercionError, TagError, UnsupportedTypeError
from .fields import is_subclass, unwrap_optional
from .rfc3339 import parse_rfc3339
from .scalars import Float32, int_bounds, is_unsigned
from .tags import FileKind, file_kind

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence
    from typing import Any, Protocol

    from python_multipart.multipart import File

    from .fields import FieldDescriptor
    from .tags import FieldTag

    class TextDecoder(Protocol):
        """A type that parses its own value out of submitted text.

        The method mutates the instance in place and raises ValueError if
        the text is not acceptable.
        """

        def decode_form_value(self, value: str) -> None: ...


#: Name of the method a type implements to take over text decoding.
DECODER_METHOD = "decode_form_value"

TRUE_VALUES = frozenset(("1", "t", "T", "TRUE", "true", "True"))
FALSE_VALUES = frozenset(("0", "f", "F", "FALSE", "false", "False"))

SIGNED_RE = re.compile(r"[+-]?[0-9]+")
UNSIGNED_RE = re.compile(r"[0-9]+")
FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def get_text_decoder(obj: Any) -> Callable[..., None] | None:
    """Return the custom decoding method of a type or instance, or None.

    Called on a class this gives the plain function, which is enough to tell
    whether the type opts in.  Called on an instance it gives the bound
    method to invoke with the submitted text.
    """
    decoder = getattr(obj, DECODER_METHOD, None)
    if decoder is None or not callable(decoder):
        return None
    return decoder


def parse_bool(text: str) -> bool:
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"parsing {text!r}: invalid syntax")


def parse_int(text: str, cls: type = int) -> int:
    """Parse a base 10 integer and check it against the range of `cls`.

    Unsigned types reject any sign, signed types accept a leading ``+`` or
    ``-``.  Whitespace and digit separators are never accepted.
    """
    pattern = UNSIGNED_RE if is_unsigned(cls) else SIGNED_RE
    if pattern.fullmatch(text) is None:
        raise ValueError(f"parsing {text!r}: invalid syntax")

    value = int(text, 10)
    low, high = int_bounds(cls)
    if low is not None and high is not None and not low <= value <= high:
        raise ValueError(f"parsing {text!r}: value out of range")

    if cls is int:
        return value
    return cls(value)


def parse_float(text: str, cls: type = float) -> float:
    if FLOAT_RE.fullmatch(text) is None:
        raise ValueError(f"parsing {text!r}: invalid syntax")

    value = float(text)
    if math.isinf(value) and text.lstrip("+-").lower() not in ("inf", "infinity"):
        raise ValueError(f"parsing {text!r}: value out of range")

    if cls is float:
        return value
    if issubclass(cls, Float32):
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"parsing {text!r}: value out of range")
    return cls(value)


def parse_datetime(text: str, cls: type = datetime) -> datetime:
    value = parse_rfc3339(text)
    if cls is datetime:
        return value
    return cls.combine(value.date(), value.timetz())


# Sentinel returned by convert_text for types without built-in handling.
_unsupported = object()


def convert_text(cls: Any, text: str) -> Any:
    """Convert `text` to the built-in type `cls`.

    Returns the ``_unsupported`` sentinel when `cls` is not one of the
    handled types.  ``bool`` is tested before ``int`` since it subclasses it.
    """
    if is_subclass(cls, bool):
        return parse_bool(text)
    if is_subclass(cls, str):
        return text if cls is str else cls(text)
    if is_subclass(cls, int):
        return parse_int(text, cls)
    if is_subclass(cls, float):
        return parse_float(text, cls)
    if is_subclass(cls, datetime):
        return parse_datetime(text, cls)
    return _unsupported


def _decode_failed(field: FieldDescriptor, tag: FieldTag, text: str, e: ValueError) -> CoercionError:
    logging.getLogger(__name__).warning("Cannot decode %r into field %s: %s", text, field.name, e)
    return CoercionError(field.name, tag.name, text, str(e))


def coerce_text(
    record: object,
    field: FieldDescriptor,
    tag: FieldTag,
    text: str,
    error_on_unsupported: bool = False,
) -> None:
    """Convert a submitted text value and store it in `field` of `record`.

    A type that implements ``decode_form_value`` always decodes the text
    itself, even if it also subclasses one of the built-in types.  When such
    a field is still None, an instance is created with a no-argument call to
    the type and stored before the hook runs; a type that cannot be built
    that way, or whose instance hides the method behind something that is
    not callable, is a :class:`TagError`.

    On failure the field keeps its value and :class:`CoercionError` is
    raised.
    """
    logger = logging.getLogger(__name__)
    cls, _ = unwrap_optional(field.hint)

    if isinstance(cls, type) and get_text_decoder(cls) is not None:
        target: TextDecoder = field.get(record)
        if target is None:
            try:
                target = cls()
            except TypeError as e:
                raise TagError(field.name, f"cannot create {cls.__name__} without arguments: {e}") from e
            field.set(record, target)

        decoder = get_text_decoder(target)
        if decoder is None:
            raise TagError(field.name, f"{type(target).__name__}.{DECODER_METHOD} is not callable")
        try:
            decoder(text)
        except ValueError as e:
            raise _decode_failed(field, tag, text, e) from e
        return

    try:
        value = convert_text(cls, text)
    except ValueError as e:
        raise _decode_failed(field, tag, text, e) from e

    if value is _unsupported:
        if error_on_unsupported:
            msg = f"unsupported type {field.hint!r}"
            logger.warning("Cannot decode field %s: %s", field.name, msg)
            raise UnsupportedTypeError(field.name, tag.name, text, msg)
        logger.debug("Skipping field %s of unsupported type %r", field.name, field.hint)
        return

    field.set(record, value)


def coerce_file(record: object, field: FieldDescriptor, tag: FieldTag, files: Sequence[File]) -> None:
    """Store uploaded file handles in a file field.

    A single-file field receives the first handle; a list field receives all
    of them in submission order.
    """
    kind = file_kind(field.hint)
    if kind is FileKind.SINGLE:
        if len(files) > 1:
            logging.getLogger(__name__).debug(
                "Field %s takes one file, dropping %d more under %r", field.name, len(files) - 1, tag.name
            )
        field.set(record, files[0])
    elif kind is FileKind.LIST:
        field.set(record, list(files))
    else:
        raise TagError(field.name, f"{field.hint!r} cannot hold uploaded files")
