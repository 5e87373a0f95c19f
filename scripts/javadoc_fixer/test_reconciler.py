#!/usr/bin/env python3
"""
Unit tests for tag reconciliation.
"""

import os
import sys
import unittest
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from api_diff import ApiDiff
from comment_assembler import assemble
from declarations import FieldDeclaration, JavaType, MethodDeclaration, Parameter, TypeDeclaration
from fix_config import FixConfig
from javadoc_parser import parse_doclet_tags, parse_existing_javadoc
from reconciler import (
    HAS_COMMENT_HAS_TAGS,
    HAS_COMMENT_NO_TAGS,
    NO_COMMENT,
    ReconcileContext,
    comment_state,
    is_in_scope,
    reconcile_comment,
    replace_link_tags,
    stamped_types_for,
)
from type_resolver import ClassIndex, ClassInfo

STRING = JavaType('String', 'java.lang.String')
INT = JavaType('int')
VOID = JavaType('void')

FOO = TypeDeclaration('Foo', 3, package='com.x', modifiers=['public'], imports=['java.util.List'])


def comment_kwargs(raw):
    if not raw:
        return {}
    return {'tags': parse_doclet_tags(raw), 'comment': parse_existing_javadoc(raw)['description'], 'comment_line': 1}


def make_method(name='run', parameters=(), return_type=VOID, exceptions=(), raw='', **kwargs):
    kwargs.setdefault('modifiers', ['public'])
    return MethodDeclaration(name, 10, parameters=parameters, return_type=return_type, exceptions=exceptions,
                             declaring_type=FOO, **comment_kwargs(raw), **kwargs)


def make_resolver():
    resolver = ClassIndex()
    resolver.add(ClassInfo('com.x.Foo'))
    resolver.add(ClassInfo('com.x.MyRuntimeException', 'java.lang.RuntimeException'))
    resolver.add(ClassInfo('com.x.MyChecked', 'java.lang.Exception'))
    return resolver


def make_context(stamped_types=(), api_diff=None, **settings):
    settings.setdefault('default_author', 'jdoe')
    return ReconcileContext(FixConfig(**settings), api_diff=api_diff, resolver=make_resolver(),
                            stamped_types=stamped_types, file='Foo.java')


class TestStateAndScope(unittest.TestCase):

    def test_comment_state(self):
        self.assertEqual(comment_state(make_method()), NO_COMMENT)
        self.assertEqual(comment_state(make_method(raw='/**\n * Doc.\n */')), HAS_COMMENT_NO_TAGS)
        self.assertEqual(comment_state(make_method(raw='/**\n * Doc.\n * @return x\n */')), HAS_COMMENT_HAS_TAGS)

    def test_method_scope_follows_level(self):
        config = FixConfig(default_author='jdoe')
        self.assertTrue(is_in_scope(make_method(modifiers=['protected']), config))
        self.assertFalse(is_in_scope(make_method(modifiers=[]), config))
        self.assertFalse(is_in_scope(make_method(), config.replace(fix_method_comment=False)))

    def test_interface_members_are_in_scope(self):
        shape = TypeDeclaration('Shape', 1, type_kind='interface', modifiers=['public'])
        config = FixConfig(default_author='jdoe')
        method = MethodDeclaration('area', 3, return_type=INT, declaring_type=shape)
        field = FieldDeclaration('SIDES', 2, java_type=INT, initializer='4', declaring_type=shape)
        self.assertTrue(is_in_scope(method, config))
        self.assertTrue(is_in_scope(field, config))

    def test_types_nested_in_interface_are_in_scope(self):
        shape = TypeDeclaration('Shape', 1, type_kind='interface', modifiers=['public'])
        color = TypeDeclaration('Color', 2, type_kind='enum', declaring_type=shape)
        self.assertTrue(is_in_scope(color, FixConfig(default_author='jdoe')))
        self.assertFalse(is_in_scope(color, FixConfig(default_author='jdoe', fix_class_comment=False)))

    def test_only_static_fields_are_in_scope(self):
        config = FixConfig(default_author='jdoe')
        constant = FieldDeclaration('MAX', 5, java_type=INT, modifiers=['public', 'static', 'final'], declaring_type=FOO)
        member = FieldDeclaration('count', 6, java_type=INT, modifiers=['public'], declaring_type=FOO)
        self.assertTrue(is_in_scope(constant, config))
        self.assertFalse(is_in_scope(member, config))

    def test_stamped_types(self):
        config = FixConfig(default_author='jdoe')
        hidden = TypeDeclaration('Hidden', 20, package='com.x')
        stamped = TypeDeclaration('Old', 30, package='com.x', tags=parse_doclet_tags('/**\n * @since 0.9\n */'))
        self.assertEqual(stamped_types_for([FOO, hidden, stamped, make_method()], config),
                         frozenset(['com.x.Foo', 'com.x.Old']))
        self.assertEqual(stamped_types_for([FOO], config.replace(fix_tags='param')), frozenset())


class TestLinkReplacement(unittest.TestCase):
    """Test qualification of {@link} targets."""

    def setUp(self):
        self.resolver = make_resolver()

    def link(self, text):
        return replace_link_tags(text, FOO, self.resolver)

    def test_imported_class(self):
        self.assertEqual(self.link(' * See {@link List}.'), ' * See {@link java.util.List}.')

    def test_member_reference(self):
        self.assertEqual(self.link('{@link String#length() the length}'),
                         '{@link java.lang.String#length() the length}')

    def test_same_class_member(self):
        self.assertEqual(self.link('{@link #run()}'), '{@link #run()}')

    def test_label(self):
        self.assertEqual(self.link('{@link MyChecked checked one}'), '{@link com.x.MyChecked checked one}')

    def test_unknown_class_is_trimmed(self):
        self.assertEqual(self.link('{@link  Unknown }'), '{@link Unknown}')

    def test_several_links(self):
        self.assertEqual(self.link('{@link String} or {@link List}'),
                         '{@link java.lang.String} or {@link java.util.List}')

    def test_other_inline_tags_untouched(self):
        self.assertEqual(self.link('{@linkplain String} {@code List}'), '{@linkplain String} {@code List}')

    def test_unterminated_link(self):
        self.assertEqual(self.link('{@link String'), '{@link String')


class TestMethodReconciliation(unittest.TestCase):
    """Test merging existing method tags with synthesized ones."""

    def test_stub_tags_are_completed(self):
        raw = """    /**
     * Does things.
     *
     * @param name
     * @throws MyRuntimeException
     */"""
        method = make_method(parameters=[Parameter('name', STRING)],
                             exceptions=[JavaType('MyRuntimeException', 'com.x.MyRuntimeException')], raw=raw)
        draft = reconcile_comment(raw, method, '    ', make_context(fix_tags='param,return,throws'))
        self.assertEqual(assemble('    ', draft), [
            '    /**',
            '     * Does things.',
            '     *',
            '     * @param name a {@link java.lang.String} object.',
            '     * @throws com.x.MyRuntimeException if any.',
            '     */',
        ])

    @patch('reconciler.logger')
    def test_unknown_param_is_removed(self, mock_logger):
        raw = """/**
 * Doc.
 * @param bogus the bogus
 * @param name the name
 */"""
        method = make_method(parameters=[Parameter('name', STRING)], raw=raw)
        draft = reconcile_comment(raw, method, '', make_context(fix_tags='param'))
        self.assertEqual(draft.tags, [' * @param name the name'])
        message = mock_logger.warning.call_args[0][0]
        self.assertEqual(message, "Fixed unknown param 'bogus' defined in com.x.Foo#run(java.lang.String)")
        self.assertEqual(mock_logger.warning.call_args[1], {'file': 'Foo.java', 'line': 10})

    def test_undeclared_throws_are_reclassified(self):
        """Test runtime exceptions are kept and qualified while checked ones are dropped."""
        raw = """/**
 * Doc.
 * @throws IllegalStateException when bad
 * @throws java.io.IOException on failure
 * @throws MyChecked never
 */"""
        method = make_method(raw=raw)
        draft = reconcile_comment(raw, method, '', make_context(fix_tags='throws'))
        self.assertEqual(draft.tags, [' * @throws java.lang.IllegalStateException when bad'])

    @patch('reconciler.logger')
    def test_unknown_throws_kept_by_default(self, mock_logger):
        raw = '/**\n * Doc.\n * @throws Boom on boom\n */'
        draft = reconcile_comment(raw, make_method(raw=raw), '', make_context(fix_tags='throws'))
        self.assertEqual(draft.tags, [' * @throws Boom on boom'])
        self.assertIn("Found unknown throws 'Boom'", mock_logger.warning.call_args[0][0])

    @patch('reconciler.logger')
    def test_unknown_throws_removed_when_asked(self, mock_logger):
        raw = '/**\n * Doc.\n * @throws Boom on boom\n */'
        draft = reconcile_comment(raw, make_method(raw=raw), '',
                                  make_context(fix_tags='throws', remove_unknown_throws=True))
        self.assertEqual(draft.tags, [])
        self.assertIn("Ignoring unknown throws 'Boom'", mock_logger.warning.call_args[0][0])

    def test_unknown_tags_keep_their_place(self):
        raw = """/**
 * Doc.
 * @see Other
 * @param name the name
 * @deprecated use x
 */"""
        method = make_method(parameters=[Parameter('name', STRING)], return_type=INT, raw=raw)
        draft = reconcile_comment(raw, method, '', make_context(fix_tags='param,return'))
        self.assertEqual(draft.tags, [' * @see Other', ' * @param name the name', ' * @deprecated use x',
                                      ' * @return a int.'])

    def test_return_removed_from_void_method(self):
        raw = '/**\n * Doc.\n * @return nothing\n */'
        draft = reconcile_comment(raw, make_method(raw=raw), '', make_context(fix_tags='return'))
        self.assertEqual(draft.tags, [])

    def test_tags_left_alone_when_not_fixed(self):
        raw = '/**\n * Doc.\n * @param bogus the bogus\n * @return nothing\n */'
        draft = reconcile_comment(raw, make_method(raw=raw), '', make_context(fix_tags='author'))
        self.assertEqual(draft.tags, [' * @param bogus the bogus', ' * @return nothing'])

    def test_missing_comment_is_synthesized(self):
        method = MethodDeclaration(
            'wrap', 10,
            parameters=[Parameter('item', JavaType('T', is_type_variable=True)), Parameter('count', INT)],
            type_parameters=['T'],
            return_type=JavaType('List', 'java.util.List'),
            exceptions=[JavaType('IOException', 'java.io.IOException')],
            modifiers=['public'],
            declaring_type=FOO,
        )
        draft = reconcile_comment('', method, '', make_context())
        self.assertEqual(assemble('', draft), [
            '/**',
            ' * <p>wrap.</p>',
            ' *',
            ' * @param item a T object.',
            ' * @param count a int.',
            ' * @param <T> a T object.',
            ' * @return a {@link java.util.List} object.',
            ' * @throws java.io.IOException if any.',
            ' * @since 1.0',
            ' */',
        ])

    def test_no_since_when_type_is_stamped(self):
        draft = reconcile_comment('', make_method(), '', make_context(stamped_types=['com.x.Foo']))
        self.assertEqual(draft.tags, [])

    def test_since_follows_api_diff(self):
        diff = ApiDiff.from_lines(["INFO: 7011: com.x.Foo: Method 'public void ping()' has been added"])
        context = make_context(api_diff=diff)
        self.assertEqual(reconcile_comment('', make_method('ping'), '', context).tags, [' * @since 1.0'])
        self.assertEqual(reconcile_comment('', make_method('pong'), '', context).tags, [])

    def test_inherited_method_gets_shorthand(self):
        method = make_method('toString', return_type=STRING)
        draft = reconcile_comment('', method, '    ', make_context())
        self.assertEqual(assemble('    ', draft), ['    /** {@inheritDoc} */'])

    def test_out_of_scope(self):
        self.assertIsNone(reconcile_comment('', make_method(modifiers=['private']), '', make_context()))

    def test_links_in_body(self):
        raw = '/**\n * Uses {@link List}.\n */'
        draft = reconcile_comment(raw, make_method(raw=raw), '', make_context(fix_tags='link'))
        self.assertEqual(draft.body, [' * Uses {@link java.util.List}.'])


class TestTypeAndFieldReconciliation(unittest.TestCase):

    def test_type_without_comment(self):
        draft = reconcile_comment('', FOO, '', make_context())
        self.assertEqual(assemble('', draft), [
            '/**',
            ' * <p>Foo class.</p>',
            ' *',
            ' * @author jdoe',
            ' * @version $Id: $',
            ' * @since 1.0',
            ' */',
        ])

    def test_type_tags_are_appended_after_existing(self):
        raw = '/**\n * The foo.\n * @version 2\n */'
        declaration = TypeDeclaration('Foo', 5, package='com.x', modifiers=['public'], **comment_kwargs(raw))
        draft = reconcile_comment(raw, declaration, '', make_context())
        self.assertEqual(draft.body, [' * The foo.'])
        self.assertEqual(draft.tags, [' * @version 2', ' * @author jdoe', ' * @since 1.0'])

    def test_type_tags_without_value_survive(self):
        raw = '/**\n * Foo.\n * @deprecated\n * @author me\n * @version $Id: $\n * @since 1.0\n */'
        declaration = TypeDeclaration('Foo', 7, package='com.x', modifiers=['public'], **comment_kwargs(raw))
        draft = reconcile_comment(raw, declaration, '', make_context())
        self.assertEqual(draft.tags, [' * @deprecated', ' * @author me', ' * @version $Id: $', ' * @since 1.0'])

    def test_type_since_follows_api_diff(self):
        diff = ApiDiff.from_lines(["INFO: 8000: com.x.Other: Class com.x.Other added"])
        draft = reconcile_comment('', FOO, '', make_context(api_diff=diff, fix_tags='since'))
        self.assertEqual(draft.tags, [])

    def test_constant_field(self):
        field = FieldDeclaration('MAX', 5, java_type=INT, initializer='10',
                                 modifiers=['public', 'static', 'final'], declaring_type=FOO)
        draft = reconcile_comment('', field, '    ', make_context())
        self.assertEqual(assemble('    ', draft), ['    /** Constant <code>MAX=10</code> */'])

    def test_documented_field_is_kept(self):
        raw = '/** The max. */'
        field = FieldDeclaration('MAX', 5, java_type=INT, initializer='10',
                                 modifiers=['public', 'static', 'final'], declaring_type=FOO, **comment_kwargs(raw))
        self.assertIsNone(reconcile_comment(raw, field, '', make_context()))


if __name__ == '__main__':
    # Run tests with verbose output
    unittest.main(verbosity=2)
