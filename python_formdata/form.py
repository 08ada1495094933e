from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import unquote_to_bytes

from python_multipart import create_form_parser
from python_multipart.multipart import parse_options_header

from .exceptions import CharsetError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Mapping
    from typing import Any, Protocol

    from python_multipart.multipart import Field, File

    class SupportsRead(Protocol):
        def read(self, __n: int) -> bytes: ...


URLENCODED_TYPES = (b"application/x-www-form-urlencoded", b"application/x-url-encoded")

# Configuration keys handed through to python-multipart's FormParser.
PARSER_CONFIG_KEYS = (
    "MAX_BODY_SIZE",
    "MAX_MEMORY_FILE_SIZE",
    "UPLOAD_DIR",
    "UPLOAD_KEEP_FILENAME",
    "UPLOAD_KEEP_EXTENSIONS",
    "UPLOAD_ERROR_ON_BAD_CTE",
)


class ParsedForm:
    """A fully buffered form: text values and uploaded files keyed by field
    name.

    Both mappings keep values in submission order.  A name may appear in
    both mappings; nothing here enforces otherwise.
    """

    def __init__(
        self,
        values: Mapping[str, Iterable[str]] | None = None,
        files: Mapping[str, Iterable[File]] | None = None,
    ) -> None:
        self.values: dict[str, list[str]] = {k: list(v) for k, v in (values or {}).items()}
        self.files: dict[str, list[File]] = {k: list(v) for k, v in (files or {}).items()}

    def add_value(self, name: str, value: str) -> None:
        self.values.setdefault(name, []).append(value)

    def add_file(self, name: str, file: File) -> None:
        self.files.setdefault(name, []).append(file)

    def get_value(self, name: str) -> str | None:
        """Return the first text value submitted under `name`."""
        values = self.values.get(name)
        if not values:
            return None
        return values[0]

    def get_files(self, name: str) -> list[File]:
        return self.files.get(name, [])

    def close(self) -> None:
        """Close every uploaded file."""
        for files in self.files.values():
            for f in files:
                f.close()

    def __contains__(self, name: object) -> bool:
        return bool(self.values.get(name)) or bool(self.files.get(name))  # type: ignore[call-overload]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(values={self.values!r}, files={self.files!r})"


def _decode(data: bytes | None, charset: str, unquote: bool = False) -> str:
    if data is None:
        return ""
    if unquote:
        data = unquote_to_bytes(data.replace(b"+", b" "))
    try:
        return data.decode(charset)
    except UnicodeDecodeError as e:
        logging.getLogger(__name__).warning("Cannot decode %r as %s", data[:97], charset)
        raise CharsetError(f"cannot decode {data[:97]!r} as {charset}") from e


def parse_form_data(
    headers: Mapping[str, Any],
    input_stream: SupportsRead,
    config: Mapping[str, Any] = {},
    chunk_size: int = 1048576,
) -> ParsedForm:
    """Read a request body and collect its fields and files.

    Wire parsing is done by python-multipart, so any body it accepts works
    here: ``multipart/form-data``, ``application/x-www-form-urlencoded`` and
    ``application/octet-stream`` (stored under the empty field name).
    Parse errors are python-multipart's ``FormParserError`` and propagate
    unchanged.

    :param headers: request headers; ``Content-Type`` is required and
                    ``Content-Length`` bounds the amount read.
    :param input_stream: anything with a ``read(n)`` method.
    :param config: decoder configuration; ``CHARSET`` and the upload keys
                   in :data:`PARSER_CONFIG_KEYS` are used.
    :param chunk_size: bytes to read per call.
    """
    charset = config.get("CHARSET", "utf-8")
    content_type, _ = parse_options_header(headers.get("Content-Type"))
    # python-multipart hands urlencoded fields over still percent-encoded.
    unquote = content_type.lower() in URLENCODED_TYPES
    form = ParsedForm()

    def on_field(field: Field) -> None:
        form.add_value(_decode(field.field_name, charset, unquote), _decode(field.value, charset, unquote))

    def on_file(file: File) -> None:
        form.add_file(_decode(file.field_name, charset), file)

    parser_config = {k: config[k] for k in PARSER_CONFIG_KEYS if k in config}
    parser = create_form_parser(dict(headers), on_field, on_file, config=parser_config)

    content_length: int | float | None = headers.get("Content-Length")
    if content_length is not None:
        content_length = int(content_length)
    else:
        content_length = float("inf")
    bytes_read = 0

    while True:
        max_readable = int(min(content_length - bytes_read, chunk_size))
        buff = input_stream.read(max_readable)

        parser.write(buff)
        bytes_read += len(buff)

        if len(buff) != max_readable or bytes_read == content_length:
            break

    parser.finalize()
    logging.getLogger(__name__).debug(
        "Parsed %d field names and %d file field names", len(form.values), len(form.files)
    )
    return form
