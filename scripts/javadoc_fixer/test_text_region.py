#!/usr/bin/env python3
"""
Unit tests for locating and slicing existing Javadoc blocks.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from text_region import (
    align_indentation,
    collapse_whitespace,
    detect_indentation,
    extract_comment_body,
    extract_description,
    extract_preceding_comment,
    extract_trailing_text,
    find_comment_end,
    find_comment_start,
    has_inherited_tag,
    is_tag_line,
    remove_last_empty_lines,
    tag_line_tokens,
)

LINES = [
    'public class A {',
    '    /**',
    '     * Doc.',
    '     */',
    '    void m();',
    '}',
]


class TestWhitespaceHelpers(unittest.TestCase):
    """Test string helpers."""

    def test_collapse_whitespace(self):
        """Test runs of whitespace become one space."""
        self.assertEqual(collapse_whitespace('a  \t b\n c'), 'a b c')

    def test_detect_indentation(self):
        """Test detect_indentation function."""
        self.assertEqual(detect_indentation('    public void method() {'), '    ')
        self.assertEqual(detect_indentation('\tpublic void method() {'), '\t')
        self.assertEqual(detect_indentation('public class Test {'), '')


class TestLocateComment(unittest.TestCase):
    """Test finding the block above a declaration."""

    def test_find_comment_start(self):
        """Test the start token line is found above the declaration."""
        self.assertEqual(find_comment_start(LINES, 5), 1)

    def test_find_comment_start_without_comment(self):
        """Test None is returned when nothing precedes the declaration."""
        self.assertIsNone(find_comment_start(LINES, 1))

    def test_find_comment_end(self):
        """Test the end token line is found."""
        self.assertEqual(find_comment_end(LINES, 1, 5), 3)

    def test_find_comment_end_on_start_line(self):
        """Test a one-line block ends on its start line."""
        self.assertEqual(find_comment_end(['/** Doc. */', 'int x;'], 0, 2), 0)

    def test_extract_preceding_comment(self):
        """Test the raw block is returned with its indentation."""
        self.assertEqual(extract_preceding_comment(LINES, 5), '    /**\n     * Doc.\n     */')

    def test_extract_preceding_comment_missing(self):
        """Test an empty string is returned when there is no block."""
        self.assertEqual(extract_preceding_comment(LINES, 1), '')

    def test_extract_preceding_comment_from_known_start(self):
        """Test a known start line is used instead of scanning upward."""
        lines = ['/**', ' * Doc.', ' */', '/** not this one */ // note  ', 'void m();']
        self.assertEqual(extract_preceding_comment(lines, 5), '/** not this one */ // note')
        self.assertEqual(extract_preceding_comment(lines, 5, 0), '/**\n * Doc.\n */\n/** not this one */ // note')


class TestSliceComment(unittest.TestCase):
    """Test slicing a raw block into its parts."""

    def test_extract_comment_body(self):
        """Test the text between the tokens is returned."""
        self.assertEqual(extract_comment_body('/**\n * Doc.\n */'), ' * Doc.')

    def test_extract_comment_body_single_line(self):
        """Test a one-line block."""
        self.assertEqual(extract_comment_body('/** Doc. */'), ' Doc.')

    def test_extract_description_stops_at_tags(self):
        """Test the description ends at the first tag line."""
        raw = '/**\n * Doc.\n *\n * @param x the x\n */'
        self.assertEqual(remove_last_empty_lines(extract_description(raw)), ' * Doc.')

    def test_extract_trailing_text(self):
        """Test text after the end token is split off."""
        rest, following = extract_trailing_text('/** Doc. */ // note\n// more')
        self.assertEqual(rest, ' // note')
        self.assertEqual(following, ['// more'])

    def test_is_tag_line(self):
        """Test tag line detection with and without a space after the star."""
        self.assertTrue(is_tag_line('     * @param x the x'))
        self.assertTrue(is_tag_line('     *@return it'))
        self.assertFalse(is_tag_line('     * mail me @ home'))
        self.assertFalse(is_tag_line('     * text @param'))

    def test_tag_line_tokens(self):
        """Test tokens are split without the star."""
        self.assertEqual(tag_line_tokens('   * @param  x the x'), ['@param', 'x', 'the', 'x'])

    def test_remove_last_empty_lines(self):
        """Test trailing star lines are dropped."""
        self.assertEqual(remove_last_empty_lines(' * Doc.\n *\n *\n'), ' * Doc.')

    def test_align_indentation(self):
        """Test lines are re-indented under the declaration indent."""
        self.assertEqual(align_indentation('  * Doc.\n *   indented', '    '),
                         ['     * Doc.', '     *   indented'])

    def test_align_indentation_adds_star(self):
        """Test a line without a star gets one."""
        self.assertEqual(align_indentation(' Doc.', ''), [' * Doc.'])


class TestInheritedTag(unittest.TestCase):
    """Test detection of comments made only of {@inheritDoc}."""

    def test_shorthand(self):
        self.assertTrue(has_inherited_tag('/** {@inheritDoc} */'))

    def test_multi_line_marker_only(self):
        self.assertTrue(has_inherited_tag('/**\n * {@inheritDoc}\n *\n */'))

    def test_marker_with_text(self):
        self.assertFalse(has_inherited_tag('/**\n * {@inheritDoc}\n * More.\n */'))

    def test_empty(self):
        self.assertFalse(has_inherited_tag(''))


if __name__ == '__main__':
    # Run tests with verbose output
    unittest.main(verbosity=2)
