from __future__ import annotations

import sys
import unittest
from dataclasses import dataclass, field
from typing import List, Optional

import pytest
from python_multipart.multipart import File

from python_formdata.exceptions import TagError
from python_formdata.fields import FieldDescriptor, list_item_type, record_fields, unwrap_optional
from python_formdata.tags import EXCLUDED, FieldTag, FileKind, file_kind, get_field_tag

from .records import BadTag, Frozen, Object, Untagged, Uploads


def descriptor(name: str, hint: object, **metadata: object) -> FieldDescriptor:
    return FieldDescriptor(name, hint, metadata)


class TestRecordFields(unittest.TestCase):
    def test_declaration_order(self) -> None:
        names = [f.name for f in record_fields(Object)]
        self.assertEqual(names, ["number", "float_", "ignore", "string", "file", "date", "test", "m", "array"])

    def test_resolves_string_annotations(self) -> None:
        fields = {f.name: f for f in record_fields(Uploads)}
        self.assertEqual(fields["avatar"].hint, Optional[File])
        self.assertEqual(fields["attachments"].hint, list[File])

    def test_metadata(self) -> None:
        fields = {f.name: f for f in record_fields(Object)}
        self.assertEqual(fields["float_"].tag("formdata"), "float")
        self.assertIsNone(fields["float_"].tag("json"))

    def test_get_set(self) -> None:
        obj = Object()
        f = record_fields(Object)[0]
        f.set(obj, 12)
        self.assertEqual(f.get(obj), 12)
        self.assertEqual(obj.number, 12)

    def test_not_a_dataclass(self) -> None:
        with self.assertRaises(TypeError):
            record_fields(dict)

    def test_instance_is_not_a_type(self) -> None:
        with self.assertRaises(TypeError):
            record_fields(Object())  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        with self.assertRaises(TypeError):
            record_fields(Frozen)

    def test_repr(self) -> None:
        f = descriptor("name", str)
        self.assertEqual(repr(f), "FieldDescriptor(name='name', hint=<class 'str'>)")


class TestTypeHelpers(unittest.TestCase):
    def test_unwrap_optional(self) -> None:
        self.assertEqual(unwrap_optional(Optional[int]), (int, True))
        self.assertEqual(unwrap_optional(int), (int, False))

    def test_unwrap_real_union(self) -> None:
        from typing import Union

        hint = Optional[Union[int, str]]
        self.assertEqual(unwrap_optional(hint), (hint, False))

    @pytest.mark.skipif(sys.version_info < (3, 10), reason="PEP 604 unions")
    def test_unwrap_pep604(self) -> None:
        self.assertEqual(unwrap_optional(eval("int | None")), (int, True))

    def test_list_item_type(self) -> None:
        self.assertIs(list_item_type(list[File]), File)
        self.assertIs(list_item_type(List[int]), int)
        self.assertIsNone(list_item_type(list))
        self.assertIsNone(list_item_type(tuple[int]))


class TestFileKind(unittest.TestCase):
    def test_single(self) -> None:
        self.assertIs(file_kind(File), FileKind.SINGLE)
        self.assertIs(file_kind(Optional[File]), FileKind.SINGLE)

    def test_subclass(self) -> None:
        class Upload(File):
            pass

        self.assertIs(file_kind(Optional[Upload]), FileKind.SINGLE)

    def test_list(self) -> None:
        self.assertIs(file_kind(list[File]), FileKind.LIST)
        self.assertIs(file_kind(List[Optional[File]]), FileKind.LIST)

    def test_not_files(self) -> None:
        for hint in (str, bytes, Optional[int], list[str], list, dict[str, File], Optional[list[File]]):
            self.assertIs(file_kind(hint), FileKind.NONE, hint)


class TestGetFieldTag(unittest.TestCase):
    def test_no_tag_uses_declared_name(self) -> None:
        self.assertEqual(get_field_tag(descriptor("name", str)), FieldTag("name", False))

    def test_tag_equal_to_name(self) -> None:
        fields = {f.name: f for f in record_fields(Untagged)}
        self.assertEqual(get_field_tag(fields["same"]), get_field_tag(descriptor("same", str)))

    def test_single_segment(self) -> None:
        tag = get_field_tag(descriptor("float_", float, formdata="float"))
        self.assertEqual(tag.name, "float")
        self.assertFalse(tag.is_file)

    def test_empty_tag(self) -> None:
        self.assertEqual(get_field_tag(descriptor("x", str, formdata="")).name, "")

    def test_excluded(self) -> None:
        self.assertEqual(get_field_tag(descriptor("x", str, formdata="-")).name, EXCLUDED)

    def test_no_normalization(self) -> None:
        self.assertEqual(get_field_tag(descriptor("x", str, formdata=" Foo ")).name, " Foo ")

    def test_too_many_tags(self) -> None:
        fields = {f.name: f for f in record_fields(BadTag)}
        with self.assertRaises(TagError) as ctx:
            get_field_tag(fields["bad"])
        self.assertEqual(str(ctx.exception), "field bad: too many tags")
        self.assertEqual(ctx.exception.field_name, "bad")

    def test_trailing_comma_is_two_segments(self) -> None:
        with self.assertRaises(TagError):
            get_field_tag(descriptor("x", str, formdata="x,"))

    def test_non_string_tag(self) -> None:
        with self.assertRaises(TagError):
            get_field_tag(descriptor("x", str, formdata=1))

    def test_custom_tag_name(self) -> None:
        f = descriptor("x", str, formdata="a", form="b")
        self.assertEqual(get_field_tag(f, "form").name, "b")
        self.assertEqual(get_field_tag(f).name, "a")

    def test_is_file_from_type(self) -> None:
        self.assertTrue(get_field_tag(descriptor("image", Optional[File])).is_file)
        self.assertTrue(get_field_tag(descriptor("images", list[File], formdata="image")).is_file)
        self.assertFalse(get_field_tag(descriptor("image", str)).is_file)


@dataclass
class _Mixed:
    plain: str = ""
    renamed: str = field(default="", metadata={"formdata": "other"})


def test_tags_for_record() -> None:
    tags = [get_field_tag(f) for f in record_fields(_Mixed)]
    assert tags == [FieldTag("plain", False), FieldTag("other", False)]
