"""Tests for document-model schema declarations."""

import datetime
import enum
import os
import sys
import tempfile
import unittest

import pytest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from docmodel.schema import (
    DocModelError,
    Schema,
    Types,
    is_field_options,
    load_docmodel,
    load_docmodel_file,
    parse_declaration,
)


class Color(enum.Enum):
    RED = 'red'
    GREEN = 'green'


class TestParseDeclaration(unittest.TestCase):

    def test_bare_type_token(self):
        descriptor = parse_declaration(str)
        self.assertIs(descriptor.type, str)
        self.assertFalse(descriptor.is_array)
        self.assertFalse(descriptor.required)

    def test_array_of_type(self):
        descriptor = parse_declaration([Types.String])
        self.assertTrue(descriptor.is_array)
        self.assertEqual(descriptor.item.type, 'String')

    def test_empty_array(self):
        descriptor = parse_declaration([])
        self.assertTrue(descriptor.is_array)
        self.assertIsNone(descriptor.item)

    def test_array_of_subschema(self):
        sub = Schema({'name': str})
        descriptor = parse_declaration([sub])
        self.assertTrue(descriptor.is_array)
        self.assertIs(descriptor.item.nested_schema, sub)

    def test_nested_object_literal(self):
        descriptor = parse_declaration({'votes': int, 'favs': int})
        self.assertIsNone(descriptor.type)
        self.assertEqual(list(descriptor.nested_fields), ['votes', 'favs'])

    def test_field_options(self):
        descriptor = parse_declaration({'type': str, 'required': True, 'enum': ('a', 'b'), 'default': 'a'})
        self.assertIs(descriptor.type, str)
        self.assertTrue(descriptor.required)
        self.assertEqual(descriptor.enum_values, ['a', 'b'])

    def test_field_named_type(self):
        descriptor = parse_declaration({'type': {'type': int, 'enum': [1, 2, 3]}})
        self.assertIsNotNone(descriptor.nested_fields)
        self.assertEqual(descriptor.nested_fields['type'].enum_values, [1, 2, 3])

    def test_reference(self):
        descriptor = parse_declaration({'type': Types.ObjectId, 'ref': 'User'})
        self.assertEqual(descriptor.type, 'ObjectId')
        self.assertEqual(descriptor.ref, 'User')

    def test_reference_to_model_class(self):
        class User:
            pass
        descriptor = parse_declaration({'type': Types.ObjectId, 'ref': User})
        self.assertEqual(descriptor.ref, 'User')

    def test_options_with_array_type(self):
        descriptor = parse_declaration({'type': [str], 'required': True, 'enum': ['x']})
        self.assertTrue(descriptor.is_array)
        self.assertTrue(descriptor.required)
        self.assertIsNone(descriptor.enum_values)
        self.assertEqual(descriptor.item.enum_values, ['x'])

    def test_options_with_subschema_type(self):
        sub = Schema({'name': str})
        descriptor = parse_declaration({'type': sub, 'required': True})
        self.assertIs(descriptor.nested_schema, sub)
        self.assertTrue(descriptor.required)

    def test_required_with_message(self):
        self.assertTrue(parse_declaration({'type': str, 'required': [True, 'name is required']}).required)
        self.assertFalse(parse_declaration({'type': str, 'required': [False]}).required)

    def test_conditional_required(self):
        descriptor = parse_declaration({'type': str, 'required': lambda: True})
        self.assertFalse(descriptor.required)

    def test_enum_options(self):
        self.assertEqual(parse_declaration({'type': str, 'enum': {'values': ['a'], 'message': 'bad'}}).enum_values, ['a'])
        self.assertEqual(parse_declaration({'type': str, 'enum': Color}).enum_values, ['red', 'green'])

    def test_untyped(self):
        for declaration in (None, {}):
            descriptor = parse_declaration(declaration)
            self.assertIsNone(descriptor.type)
            self.assertIsNone(descriptor.nested_fields)
            self.assertIsNone(descriptor.nested_schema)
            self.assertFalse(descriptor.is_array)

    def test_subschema_marker(self):
        descriptor = parse_declaration({'$subschema': {'user': 'ObjectId'}})
        self.assertIsInstance(descriptor.nested_schema, Schema)
        self.assertIn('user', descriptor.nested_schema)

    def test_is_field_options(self):
        self.assertTrue(is_field_options({'type': str}))
        self.assertTrue(is_field_options({'type': {}}))
        self.assertFalse(is_field_options({'name': str}))
        self.assertFalse(is_field_options({'type': {'type': str}}))


class TestSchema(unittest.TestCase):

    def test_field_order(self):
        schema = Schema({'b': str, 'a': int, 'c': datetime.datetime})
        self.assertEqual(list(schema), ['b', 'a', 'c'])
        self.assertEqual([name for name, _ in schema.fields()], ['b', 'a', 'c'])
        self.assertEqual(len(schema), 3)

    def test_add_and_path(self):
        schema = Schema({'title': str})
        schema.add({'hidden': {'type': bool, 'required': True}})
        self.assertIn('hidden', schema)
        self.assertTrue(schema.path('hidden').required)
        self.assertIsNone(schema.path('missing'))

    def test_empty_schema(self):
        self.assertEqual(len(Schema()), 0)

    def test_rejects_non_mapping(self):
        with pytest.raises(DocModelError):
            Schema(['title'])


class TestLoadDocModel(unittest.TestCase):

    def test_load_docmodel(self):
        schema = load_docmodel('{"title": "String", "tags": ["String"], "hidden": {"type": "Boolean", "required": true}}')
        self.assertEqual(list(schema), ['title', 'tags', 'hidden'])
        self.assertTrue(schema.path('tags').is_array)
        self.assertTrue(schema.path('hidden').required)

    def test_load_invalid_json(self):
        with pytest.raises(DocModelError) as excinfo:
            load_docmodel('{', context='broken.json')
        self.assertIn('broken.json', str(excinfo.value))
        self.assertEqual(excinfo.value.context, 'broken.json')

    def test_load_non_object_root(self):
        with pytest.raises(DocModelError):
            load_docmodel('"String"')

    def test_load_docmodel_file(self):
        docmodel_path = os.path.join(os.path.dirname(__file__), 'docmodel', 'blogpost.json')
        schema = load_docmodel_file(docmodel_path)
        self.assertIn('comments', schema)
        self.assertIsNotNone(schema.path('nestedUser').nested_schema)

    def test_load_docmodel_file_reports_path(self):
        docmodel_path = os.path.join(tempfile.gettempdir(), 'docmodel-broken.json')
        with open(docmodel_path, 'w', encoding='utf-8') as file:
            file.write('[1, 2]')
        try:
            with pytest.raises(DocModelError) as excinfo:
                load_docmodel_file(docmodel_path)
            self.assertEqual(excinfo.value.context, docmodel_path)
        finally:
            os.remove(docmodel_path)


if __name__ == '__main__':
    unittest.main()
