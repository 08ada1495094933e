__version__ = "0.1.0"

from .coercion import get_text_decoder
from .decoder import Decoder, decode, unmarshal
from .exceptions import CharsetError, CoercionError, FormDataError, TagError, UnsupportedTypeError
from .form import ParsedForm, parse_form_data
from .tags import EXCLUDED, TAG_NAME, FieldTag, get_field_tag

__all__ = (
    "EXCLUDED",
    "TAG_NAME",
    "CharsetError",
    "CoercionError",
    "Decoder",
    "FieldTag",
    "FormDataError",
    "ParsedForm",
    "TagError",
    "UnsupportedTypeError",
    "decode",
    "get_field_tag",
    "get_text_decoder",
    "parse_form_data",
    "unmarshal",
)
