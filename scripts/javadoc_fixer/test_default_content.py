#!/usr/bin/env python3
"""
Unit tests for default comment and tag text.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from declarations import FieldDeclaration, JavaType, MethodDeclaration, TypeDeclaration
from default_content import (
    constant_string_value,
    default_body_for,
    default_field_comment,
    default_method_body,
    default_tag_value_for,
    default_type_body,
    type_variable_value,
)
from type_resolver import ClassIndex

STRING = JavaType('String', 'java.lang.String')


class TestBodies(unittest.TestCase):
    """Test default description sentences."""

    def test_class_body(self):
        self.assertEqual(default_type_body(TypeDeclaration('Foo', 1, modifiers=['public'])), '<p>Foo class.</p>')

    def test_abstract_class_body(self):
        declaration = TypeDeclaration('Foo', 1, modifiers=['public', 'abstract'])
        self.assertEqual(default_type_body(declaration), '<p>Abstract Foo class.</p>')

    def test_interface_body(self):
        declaration = TypeDeclaration('Shape', 1, type_kind='interface')
        self.assertEqual(default_type_body(declaration), '<p>Shape interface.</p>')

    def test_constructor_body(self):
        method = MethodDeclaration('Foo', 3, is_constructor=True)
        self.assertEqual(default_method_body(method), '<p>Constructor for Foo.</p>')

    def test_getter_and_setter_bodies(self):
        """Test accessors of a declared field are described as such."""
        owner = TypeDeclaration('Foo', 1, field_names=['name'])
        getter = MethodDeclaration('getName', 5, return_type=STRING, declaring_type=owner)
        setter = MethodDeclaration('setName', 9, return_type=JavaType('void'), declaring_type=owner)
        self.assertEqual(default_method_body(getter), '<p>Getter for the field <code>name</code>.</p>')
        self.assertEqual(default_method_body(setter), '<p>Setter for the field <code>name</code>.</p>')

    def test_getter_without_field(self):
        owner = TypeDeclaration('Foo', 1, field_names=['other'])
        method = MethodDeclaration('getName', 5, return_type=STRING, declaring_type=owner)
        self.assertEqual(default_method_body(method), '<p>getName.</p>')

    def test_body_for_dispatches_on_kind(self):
        owner = TypeDeclaration('Foo', 1)
        self.assertEqual(default_body_for(owner), '<p>Foo class.</p>')
        self.assertEqual(default_body_for(MethodDeclaration('run', 3, declaring_type=owner)), '<p>run.</p>')


class TestTagValues(unittest.TestCase):
    """Test default param and return values."""

    def setUp(self):
        self.resolver = ClassIndex()

    def test_primitive(self):
        self.assertEqual(default_tag_value_for(JavaType('int'), self.resolver), 'a int.')

    def test_primitive_array(self):
        self.assertEqual(default_tag_value_for(JavaType('int', dimensions=1), self.resolver), 'an array of int.')

    def test_known_class_is_linked(self):
        self.assertEqual(default_tag_value_for(STRING, self.resolver), 'a {@link java.lang.String} object.')

    def test_known_class_array(self):
        value = default_tag_value_for(JavaType('String', 'java.lang.String', 2), self.resolver)
        self.assertEqual(value, 'an array of {@link java.lang.String} objects.')

    def test_unknown_class(self):
        value = default_tag_value_for(JavaType('Bar', 'com.example.Bar'), self.resolver)
        self.assertEqual(value, 'a com.example.Bar object.')

    def test_type_variable(self):
        value = default_tag_value_for(JavaType('T', is_type_variable=True), self.resolver)
        self.assertEqual(value, 'a T object.')
        self.assertEqual(type_variable_value('K'), 'a K object.')


class TestFieldComments(unittest.TestCase):
    """Test constant field comments."""

    def test_primitive_constant(self):
        field = FieldDeclaration('MAX', 2, java_type=JavaType('int'), initializer='10')
        self.assertEqual(default_field_comment(field), 'Constant <code>MAX=10</code>')

    def test_primitive_constant_is_escaped(self):
        field = FieldDeclaration('FLAG', 2, java_type=JavaType('boolean'), initializer='1 < 2')
        self.assertEqual(default_field_comment(field), 'Constant <code>FLAG=1 &lt; 2</code>')

    def test_string_constant(self):
        field = FieldDeclaration('NAME', 2, java_type=STRING, initializer='"a<b"')
        self.assertEqual(default_field_comment(field), 'Constant <code>NAME="a&lt;b"</code>')

    def test_long_string_constant_is_truncated(self):
        field = FieldDeclaration('TEXT', 2, java_type=STRING, initializer='"' + 'x' * 45 + '"')
        self.assertEqual(default_field_comment(field), 'Constant <code>TEXT="' + 'x' * 39 + '"{trunked}</code>')

    def test_object_constant_has_no_value(self):
        field = FieldDeclaration('LIST', 2, java_type=JavaType('List', 'java.util.List'),
                                 initializer='new ArrayList<>()')
        self.assertEqual(default_field_comment(field), 'Constant <code>LIST</code>')

    def test_array_constant_has_no_value(self):
        field = FieldDeclaration('IDS', 2, java_type=JavaType('int', dimensions=1), initializer='{1, 2}')
        self.assertEqual(default_field_comment(field), 'Constant <code>IDS</code>')

    def test_constant_string_value_concatenation(self):
        self.assertEqual(constant_string_value('"ab" + "cd"'), 'abcd')
        self.assertEqual(constant_string_value('"one " +\n    "two"'), 'one two')


if __name__ == '__main__':
    # Run tests with verbose output
    unittest.main(verbosity=2)
