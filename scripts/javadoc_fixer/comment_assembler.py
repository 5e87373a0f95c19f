#!/usr/bin/env python3
"""
Assembly of a Javadoc block from its body lines and tag lines.
"""

from typing import List, Optional

from constants import START_JAVADOC, END_JAVADOC


class CommentDraft:
    """
    The parts of a regenerated comment.

    Body and tag lines are complete lines, already indented. A draft with a
    single_line value is emitted as that one line instead (inherited-doc
    shorthand, constant field comments).
    """

    def __init__(self, body=(), tags=(), single_line: Optional[str] = None):
        self.body = list(body)
        self.tags = list(tags)
        self.single_line = single_line

    @classmethod
    def one_line(cls, text: str) -> 'CommentDraft':
        return cls(single_line=text)

    def __repr__(self):
        if self.single_line is not None:
            return f"CommentDraft({self.single_line!r})"
        return f"CommentDraft(body={len(self.body)} lines, tags={len(self.tags)} lines)"


def separator_line(indent: str) -> str:
    return indent + ' *'


def is_separator_line(line: str) -> bool:
    return line.strip() == '*'


def strip_trailing_separators(lines: List[str]) -> List[str]:
    lines = list(lines)
    while lines and is_separator_line(lines[-1]):
        lines.pop()
    return lines


def assemble(indent: str, draft: CommentDraft) -> List[str]:
    """Lay out a draft as comment lines.

    The layout is start token, body, one separator, tags, end token. The
    separator only appears when there are tags, and trailing separator lines
    are dropped before the end token.

    Args:
        indent: Indentation of the documented declaration
        draft: CommentDraft to lay out

    Returns:
        list: Comment lines without line terminators
    """
    if draft.single_line is not None:
        return [indent + draft.single_line]

    lines = [indent + START_JAVADOC]
    lines.extend(strip_trailing_separators(draft.body))
    tags = strip_trailing_separators(draft.tags)
    if tags:
        lines.append(separator_line(indent))
        lines.extend(tags)
    lines = strip_trailing_separators(lines)
    lines.append(indent + ' ' + END_JAVADOC)
    return lines
