#!/usr/bin/env python3
"""
Unit tests for overriding method detection and {@inheritDoc} collapsing.
"""

import os
import sys
import unittest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from declarations import JavaType, MethodDeclaration, Parameter, TypeDeclaration
from inherited_doc import collapse_inherited, is_inherited, parameters_match
from javadoc_parser import parse_doclet_tags, parse_existing_javadoc
from type_resolver import ClassIndex, ClassInfo, MethodInfo

STRING = JavaType('String', 'java.lang.String')
OBJECT = JavaType('Object', 'java.lang.Object')
INT = JavaType('int')

IMPL = TypeDeclaration('Impl', 1, package='com.x', modifiers=['public'])


def make_method(name, *parameter_types, annotations=(), modifiers=('public',), raw=''):
    return MethodDeclaration(
        name, 10,
        parameters=[Parameter(f"arg{i}", t) for i, t in enumerate(parameter_types)],
        return_type=JavaType('void'),
        modifiers=modifiers,
        annotations=annotations,
        tags=parse_doclet_tags(raw) if raw else (),
        comment=parse_existing_javadoc(raw)['description'] if raw else None,
        declaring_type=IMPL,
    )


class TestIsInherited(unittest.TestCase):
    """Test detection against the supertypes known to the index."""

    def setUp(self):
        self.resolver = ClassIndex()
        self.resolver.add(ClassInfo('com.x.Base', methods=[
            MethodInfo('run', ['java.lang.String']),
            MethodInfo('put', ['java.lang.String', 'int']),
            MethodInfo('reset', []),
        ]))
        self.resolver.add(ClassInfo('com.x.Impl', superclass='com.x.Base'))

    def test_override_annotation(self):
        self.assertTrue(is_inherited(make_method('anything', annotations=['Override']), self.resolver))

    def test_same_signature_in_superclass(self):
        self.assertTrue(is_inherited(make_method('run', STRING), self.resolver))

    def test_object_methods(self):
        self.assertTrue(is_inherited(make_method('toString'), self.resolver))
        self.assertTrue(is_inherited(make_method('equals', OBJECT), self.resolver))

    def test_different_parameter_types(self):
        self.assertFalse(is_inherited(make_method('run', INT), self.resolver))
        self.assertFalse(is_inherited(make_method('run', STRING, INT), self.resolver))

    def test_zero_parameters(self):
        self.assertTrue(is_inherited(make_method('reset'), self.resolver))
        self.assertTrue(is_inherited(make_method('reset'), self.resolver, strict=False))

    def test_strict_compares_every_parameter(self):
        method = make_method('put', OBJECT, INT)
        self.assertFalse(is_inherited(method, self.resolver, strict=True))

    def test_legacy_compares_last_parameter(self):
        """Test the legacy match only looks at the last parameter."""
        method = make_method('put', OBJECT, INT)
        self.assertTrue(is_inherited(method, self.resolver, strict=False))
        self.assertFalse(is_inherited(make_method('put', STRING, STRING), self.resolver, strict=False))

    def test_static_method_is_not_inherited(self):
        method = make_method('run', STRING, modifiers=('public', 'static'))
        self.assertFalse(is_inherited(method, self.resolver))

    def test_unknown_declaring_type(self):
        method = make_method('run', STRING)
        self.assertFalse(is_inherited(method, ClassIndex()))

    def test_parameters_match_simple_names(self):
        self.assertTrue(parameters_match(['String'], make_method('run', STRING)))


class TestCollapseInherited(unittest.TestCase):
    """Test rewriting the comment of an inherited method."""

    def test_empty_description_becomes_shorthand(self):
        raw = '/**\n * @param arg0 the value\n */'
        draft = collapse_inherited(raw, make_method('run', STRING, raw=raw), '    ')
        self.assertEqual(draft.single_line, '/** {@inheritDoc} */')

    def test_marker_only_becomes_shorthand(self):
        raw = '/**\n * {@inheritDoc}\n *\n * @param arg0 the value\n */'
        draft = collapse_inherited(raw, make_method('run', STRING, raw=raw), '    ')
        self.assertEqual(draft.single_line, '/** {@inheritDoc} */')

    def test_description_is_kept_after_marker(self):
        """Test the marker is prepended, method tags dropped and other tags kept."""
        raw = '/**\n * Runs it.\n *\n * @param arg0 the value\n * @since 2.0\n */'
        draft = collapse_inherited(raw, make_method('run', STRING, raw=raw), '')
        self.assertIsNone(draft.single_line)
        self.assertEqual(draft.body, [' * {@inheritDoc}', ' *', ' * Runs it.'])
        self.assertEqual(draft.tags, [' * @since 2.0'])

    def test_marker_with_unknown_tag_is_kept(self):
        raw = '/**\n * {@inheritDoc}\n * @see Other\n */'
        draft = collapse_inherited(raw, make_method('run', STRING, raw=raw), '')
        self.assertEqual(draft.body, [' * {@inheritDoc}'])
        self.assertEqual(draft.tags, [' * @see Other'])


if __name__ == '__main__':
    # Run tests with verbose output
    unittest.main(verbosity=2)
