from __future__ import annotations


class FormDataError(ValueError):
    """Base error class for form data decoding."""


class TagError(FormDataError):
    """This exception is raised when a record field carries malformed tag
    metadata.  It describes a mistake in the record declaration rather than
    in the submitted request, so it is raised for every instance of the
    record class until the declaration is fixed.
    """

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"field {field_name}: {message}")
        self.field_name = field_name


class CoercionError(FormDataError):
    """This exception is raised when a submitted value cannot be converted to
    the native type of the field it was matched to, or when a custom decoder
    rejects it.
    """

    def __init__(self, field_name: str, wire_name: str, value: str, message: str) -> None:
        super().__init__(f"field {field_name} ({wire_name!r}): {message}")
        self.field_name = field_name
        self.wire_name = wire_name
        self.value = value


class UnsupportedTypeError(CoercionError):
    """Raised in strict mode for a field whose type has neither built-in
    handling nor a custom decoder.
    """


class CharsetError(FormDataError):
    """Raised when a field name or value cannot be decoded with the
    configured charset.
    """
