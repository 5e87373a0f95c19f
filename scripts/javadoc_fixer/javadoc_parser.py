#!/usr/bin/env python3
"""
Javadoc tag parsing.

Two directions are covered here: turning a raw comment into doclet tags for
the parse front end, and recovering the verbatim text of each existing tag so
the fixer can keep it, complete it or drop it.
"""

from typing import Dict, List, Optional, Tuple

from constants import PARAM_TAG, RETURN_TAG, THROWS_TAG, EXCEPTION_TAG
from declarations import METHOD_KIND, ReconciledTagSet, Tag
from errors import DuplicateTagError
from logger import get_logger
from text_region import (
    align_indentation,
    body_lines,
    extract_description,
    is_tag_line,
    remove_last_empty_lines,
    tag_line_tokens,
    trim_right,
)

logger = get_logger(__name__)


def parse_existing_javadoc(javadoc_content):
    """Parse an existing Javadoc block into its description and doclet tags.

    Args:
        javadoc_content: Raw comment text, from /** to */

    Returns:
        dict: {'description': str, 'tags': [Tag, ...]}
    """
    if not javadoc_content:
        return {'description': None, 'tags': []}

    return {
        'description': extract_description(javadoc_content),
        'tags': parse_doclet_tags(javadoc_content),
    }


def parse_doclet_tags(javadoc_content) -> List[Tag]:
    """Split the block tags of a comment into Tag objects.

    The parameters of a tag are the whitespace separated words of its value,
    continuation lines included.
    """
    tags = []
    name = None
    params = []
    start_line = None

    for index, line in enumerate(body_lines(javadoc_content)):
        if is_tag_line(line):
            if name is not None:
                tags.append(Tag(name, params, start_line))
            tokens = tag_line_tokens(line)
            name = tokens[0][1:]
            params = tokens[1:]
            start_line = index
        elif name is not None:
            params.extend(tag_line_tokens(line))

    if name is not None:
        tags.append(Tag(name, params, start_line))
    return tags


def fix_generic_tag_params(params) -> List[str]:
    """Rejoin a type parameter name split into '<', 'T', '>' by the front end."""
    params = list(params)
    if len(params) >= 3 and params[0] == '<' and params[2] == '>':
        return ['<' + params[1] + '>'] + params[3:]
    return params


def _tag_blocks(lines: List[str]) -> List[List[str]]:
    """Group comment lines into blocks, one per tag: the tag line and its continuation lines."""
    blocks = []
    for line in lines:
        if is_tag_line(line):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
    return blocks


def find_tag_text(lines: List[str], name: str, first_param: Optional[str], occurrence: int = 0) -> Optional[str]:
    """Recover the verbatim lines of one tag.

    Tags are matched on the same words parse_doclet_tags sees, so a value that
    starts on a continuation line still matches. The occurrence-th tag named
    name whose first word is first_param is taken; first_param None selects a
    tag without any value.

    Args:
        lines: Comment body lines
        name: Tag name without '@'
        first_param: First parameter of the tag, None for a tag without value
        occurrence: Which of several identical tag heads to take

    Returns:
        str: The tag lines joined with newlines, or None when not found
    """
    seen = -1
    for block in _tag_blocks(lines):
        tokens = [token for line in block for token in tag_line_tokens(line)]
        if tokens[0] != '@' + name:
            continue
        if first_param is None:
            matches = len(tokens) == 1
        else:
            matches = len(tokens) > 1 and tokens[1] == first_param
        if matches:
            seen += 1
            if seen == occurrence:
                return trim_right('\n'.join(block))
    return None


def parse_tags(raw_block: str, declaration, indent: str = '') -> ReconciledTagSet:
    """Build the tag set of a declaration from its existing tags and raw comment.

    Each tag's text is re-indented under indent. Method tags without
    parameters still count as present but are not kept. Tags whose text
    cannot be located and duplicated keys are skipped.

    Args:
        raw_block: Raw comment block above the declaration
        declaration: Declaration owning the tags
        indent: Indentation of the declaration line

    Returns:
        ReconciledTagSet
    """
    lines = body_lines(raw_block)
    tag_set = ReconciledTagSet()
    occurrences: Dict[Tuple[str, Optional[str]], int] = {}
    is_method = declaration.kind == METHOD_KIND

    for tag in declaration.tags:
        params = fix_generic_tag_params(tag.params) if is_method else list(tag.params)
        tag_set.add_name(tag.name)
        if is_method and not params:
            logger.debug(f"Ignoring @{tag.name} without value in {declaration.qualified_name}")
            continue

        first_param = params[0] if params else None
        key = (tag.name, first_param)
        occurrence = occurrences.get(key, 0)
        occurrences[key] = occurrence + 1

        text = find_tag_text(lines, tag.name, first_param, occurrence)
        if text is None:
            logger.warning(f"Could not locate the text of @{tag.name} {first_param or ''} "
                           f"in {declaration.qualified_name}")
            continue
        text = '\n'.join(align_indentation(remove_last_empty_lines(text), indent))

        try:
            if is_method and tag.name == PARAM_TAG:
                tag_set.add_param(params[0], text)
            elif is_method and tag.name == RETURN_TAG:
                tag_set.set_return(text)
            elif is_method and tag.name in (THROWS_TAG, EXCEPTION_TAG):
                tag_set.add_throws(params[0], text)
            else:
                tag_set.add_unknown(tag.name, text)
        except DuplicateTagError as e:
            logger.warning(f"Skipping tag: {e} in {declaration.qualified_name}")

    return tag_set
