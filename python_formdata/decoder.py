from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .coercion import coerce_file, coerce_text
from .fields import record_fields
from .form import parse_form_data
from .tags import EXCLUDED, TAG_NAME, get_field_tag

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Mapping
    from typing import Any, TypedDict

    from .fields import FieldDescriptor
    from .form import ParsedForm, SupportsRead
    from .tags import FieldTag

    class DecoderConfig(TypedDict, total=False):
        TAG_NAME: str
        ERROR_ON_UNSUPPORTED_TYPE: bool
        CHARSET: str
        MAX_BODY_SIZE: float
        MAX_MEMORY_FILE_SIZE: int
        UPLOAD_DIR: str | bytes | None
        UPLOAD_KEEP_FILENAME: bool
        UPLOAD_KEEP_EXTENSIONS: bool
        UPLOAD_ERROR_ON_BAD_CTE: bool

    Plan = list[tuple[FieldDescriptor, FieldTag]]


class Decoder:
    """Decodes parsed forms into dataclass instances.

    The configuration is fixed when the decoder is created, so a single
    instance can be shared by concurrent requests.  Recognised keys are:

    .. list-table::
       :widths: 15 5 5 30
       :header-rows: 1

       * - Name
         - Type
         - Default
         - Description
       * - TAG_NAME
         - `str`
         - ``"formdata"``
         - Key of the dataclass field metadata entry holding the wire name.
       * - ERROR_ON_UNSUPPORTED_TYPE
         - `bool`
         - False
         - Raise :class:`UnsupportedTypeError` for a submitted value whose
           field type has no built-in handling and no ``decode_form_value``
           method, instead of leaving the field alone.
       * - CHARSET
         - `str`
         - ``"utf-8"``
         - Charset of field names and text values on the wire.
       * - MAX_BODY_SIZE, MAX_MEMORY_FILE_SIZE, UPLOAD_*
         - -
         - python-multipart
         - Passed to python-multipart when :meth:`unmarshal` parses a body.

    :param config: overrides for :attr:`DEFAULT_CONFIG`.
    """

    DEFAULT_CONFIG: DecoderConfig = {
        "TAG_NAME": TAG_NAME,
        "ERROR_ON_UNSUPPORTED_TYPE": False,
        "CHARSET": "utf-8",
        "MAX_BODY_SIZE": float("inf"),
        "MAX_MEMORY_FILE_SIZE": 1 * 1024 * 1024,
        "UPLOAD_DIR": None,
        "UPLOAD_KEEP_FILENAME": False,
        "UPLOAD_KEEP_EXTENSIONS": False,
        "UPLOAD_ERROR_ON_BAD_CTE": False,
    }

    def __init__(self, config: Mapping[str, Any] = {}) -> None:
        self.logger = logging.getLogger(__name__)

        unknown = set(config) - set(self.DEFAULT_CONFIG)
        if unknown:
            raise ValueError(f"Unknown decoder config keys: {', '.join(sorted(unknown))}")

        self.config: DecoderConfig = self.DEFAULT_CONFIG.copy()
        self.config.update(config)  # type: ignore[typeddict-item]
        self._plans: dict[type, Plan] = {}

    @property
    def tag_name(self) -> str:
        return self.config["TAG_NAME"]

    def plan(self, record_type: type) -> Plan:
        """Classify every field of `record_type`.

        The result is cached per class.  A malformed tag anywhere in the
        class raises :class:`TagError` here, before any field is written.
        """
        plan = self._plans.get(record_type)
        if plan is None:
            fields = record_fields(record_type)
            plan = [(field, get_field_tag(field, self.tag_name)) for field in fields]
            self._plans[record_type] = plan
        return plan

    def decode(self, form: ParsedForm, out: object) -> None:
        """Fill the fields of `out` from `form`.

        Fields that are excluded, or whose wire name has nothing submitted
        under it, are left as they are.  Text fields use the first value
        submitted under their name.  The first failing field stops decoding;
        fields decoded before it keep their new values.
        """
        error_on_unsupported = self.config["ERROR_ON_UNSUPPORTED_TYPE"]

        for field, tag in self.plan(type(out)):
            if tag.name == EXCLUDED:
                continue

            if tag.is_file:
                files = form.files.get(tag.name)
                if not files:
                    self.logger.debug("No files for field %s (%r)", field.name, tag.name)
                    continue
                coerce_file(out, field, tag, files)
            else:
                values = form.values.get(tag.name)
                if not values:
                    self.logger.debug("No value for field %s (%r)", field.name, tag.name)
                    continue
                coerce_text(out, field, tag, values[0], error_on_unsupported)

    def unmarshal(self, headers: Mapping[str, Any], input_stream: SupportsRead, out: object) -> ParsedForm:
        """Parse a request body and decode it into `out`.

        Returns the parsed form so the caller can close uploaded files that
        did not end up in the record.  If decoding fails, every uploaded file
        is closed before the error propagates.
        """
        form = parse_form_data(headers, input_stream, self.config)
        try:
            self.decode(form, out)
        except BaseException:
            form.close()
            raise
        return form

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tag_name={self.tag_name!r})"


def decode(form: ParsedForm, out: object, config: Mapping[str, Any] = {}) -> None:
    """Decode an already parsed form into the dataclass instance `out`.

    Example::

        @dataclass
        class Upload:
            title: str = field(default="", metadata={"formdata": "title"})
            image: Optional[File] = field(default=None, metadata={"formdata": "image"})

        upload = Upload()
        decode(form, upload)
    """
    Decoder(config).decode(form, out)


def unmarshal(
    headers: Mapping[str, Any], input_stream: SupportsRead, out: object, config: Mapping[str, Any] = {}
) -> ParsedForm:
    """Parse the request body in `input_stream` and decode it into `out`.

    This is the one-call entry point for request handlers::

        upload = Upload()
        unmarshal(request.headers, request.stream, upload)
    """
    return Decoder(config).unmarshal(headers, input_stream, out)
