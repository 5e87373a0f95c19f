#!/usr/bin/env python3
"""
Text utilities for locating and slicing existing Javadoc blocks.

Everything here works on plain strings and line lists; nothing is modified
in place.
"""

import re
from typing import List, Optional, Tuple

from constants import START_JAVADOC, END_JAVADOC

_WHITESPACE_RUN = re.compile(r'\s+')

# {@inheritDoc} alone, optionally wrapped in comment tokens and stars.
_INHERITED_ONLY = re.compile(r'^\s*(/\*\*)?[\s*]*\{@inheritDoc\s*\}[\s*]*(\*/)?\s*$')


def trim_right(text: str) -> str:
    return text.rstrip()


def trim_left(text: str) -> str:
    return text.lstrip()


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace with a single space."""
    return _WHITESPACE_RUN.sub(' ', text)


def detect_indentation(line):
    """Detect the indentation of a line.

    Args:
        line: Line to analyze

    Returns:
        str: Leading spaces and tabs
    """
    indentation = ""
    for char in line:
        if char in [' ', '\t']:
            indentation += char
        else:
            break
    return indentation


def find_comment_start(lines: List[str], line_number: int) -> Optional[int]:
    """Find the 0-indexed line holding the start token of the Javadoc above a declaration.

    Args:
        lines: File lines
        line_number: 1-indexed line of the declaration

    Returns:
        int: index of the line starting with /**, or None if there is none
    """
    index = line_number - 2
    while index >= 0:
        if lines[index].strip().startswith(START_JAVADOC):
            return index
        index -= 1
    return None


def find_comment_end(lines: List[str], start_index: int, stop_index: int) -> Optional[int]:
    """Find the 0-indexed line holding the end token, searching [start_index, stop_index)."""
    for index in range(start_index, min(stop_index, len(lines))):
        text = lines[index]
        if index == start_index:
            text = text[text.find(START_JAVADOC) + len(START_JAVADOC):]
        if END_JAVADOC in text:
            return index
    return None


def extract_preceding_comment(lines: List[str], line_number: int, start: Optional[int] = None) -> str:
    """Extract the raw comment block written above a declaration.

    Lines are collected upward from the line before the declaration until the
    line starting with the comment start token, then put back in order. Any
    non-Javadoc comment lines between the block and the declaration are part
    of the result.

    Args:
        lines: File lines
        line_number: 1-indexed line of the declaration
        start: 0-indexed line of the start token when already known

    Returns:
        str: The block with right-trimmed lines, or '' when there is no Javadoc above
    """
    if start is None:
        start = find_comment_start(lines, line_number)
    if start is None:
        return ''
    return '\n'.join(trim_right(line) for line in lines[start:line_number - 1])


def extract_comment_body(raw_block: str) -> str:
    """Return the text between the start and end tokens of a raw block.

    One leading line break is dropped and trailing whitespace trimmed.
    """
    start = raw_block.find(START_JAVADOC)
    if start < 0:
        return ''
    content = raw_block[start + len(START_JAVADOC):]
    end = content.find(END_JAVADOC)
    if end >= 0:
        content = content[:end]
    if content.startswith('\r\n'):
        content = content[2:]
    elif content.startswith('\n') or content.startswith('\r'):
        content = content[1:]
    return trim_right(content)


def extract_trailing_text(raw_block: str) -> Tuple[str, List[str]]:
    """Split off what follows the end token of a raw block.

    Returns:
        tuple: (rest of the end token line, following lines)
    """
    end = raw_block.find(END_JAVADOC, raw_block.find(START_JAVADOC) + len(START_JAVADOC))
    if end < 0:
        return '', []
    rest = raw_block[end + len(END_JAVADOC):].split('\n')
    return rest[0], rest[1:]


def body_lines(raw_block: str) -> List[str]:
    body = extract_comment_body(raw_block)
    if not body:
        return []
    return body.split('\n')


def is_tag_line(line: str) -> bool:
    """Whether a comment line starts a block tag ('* @name' or '*@name')."""
    text = collapse_whitespace(line.strip())
    if text.startswith('*'):
        text = text[1:].lstrip()
    return text.startswith('@')


def tag_line_tokens(line: str) -> List[str]:
    """Tokens of a tag line without the leading star, e.g. ['@param', 'x', 'the', 'x']."""
    text = line.strip()
    if text.startswith('*'):
        text = text[1:]
    return text.split()


def extract_description(raw_block: str) -> str:
    """Return the comment body up to the first tag line."""
    description = []
    for line in body_lines(raw_block):
        if is_tag_line(line):
            break
        description.append(line)
    return trim_right('\n'.join(description))


def remove_last_empty_lines(text: str) -> str:
    """Drop trailing lines that hold nothing but a star."""
    lines = text.split('\n')
    while lines and lines[-1].strip() in ('*', ''):
        lines.pop()
    return '\n'.join(lines)


def align_indentation(text: str, indent: str) -> List[str]:
    """Re-indent comment lines under indent, adding the leading star where it is missing."""
    if not text:
        return []
    aligned = []
    for line in text.split('\n'):
        stripped = line.strip()
        if not stripped.startswith('*'):
            stripped = '*' + line
        aligned.append(indent + ' ' + trim_left(stripped))
    return aligned


def has_inherited_tag(text: str) -> bool:
    """Whether the text is nothing more than {@inheritDoc} inside comment decoration."""
    if not text:
        return False
    return _INHERITED_ONLY.match(collapse_whitespace(text)) is not None
