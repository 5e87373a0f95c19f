#!/usr/bin/env python3
"""
Common functionality for fixing Javadoc in Java files.
Contains shared functions used by both standalone.py and action.py: turning
reconciled comments into line edits and writing fixed files back.
"""

import os
import shutil
import tempfile
from typing import List, Optional

from comment_assembler import assemble
from constants import START_JAVADOC
from errors import FileWriteError, ReconciliationError, SourceParseError
from java_parser import parse_java_source
from logger import get_logger
from reconciler import ReconcileContext, reconcile_comment, stamped_types_for
from text_region import (
    detect_indentation,
    extract_preceding_comment,
    extract_trailing_text,
    find_comment_end,
    find_comment_start,
)

logger = get_logger(__name__)


class Edit:
    """Replace lines[start:end] with new_lines (0-indexed, end exclusive)."""

    def __init__(self, start: int, end: int, new_lines, declaration=None):
        self.start = start
        self.end = end
        self.new_lines = list(new_lines)
        self.declaration = declaration

    def __repr__(self):
        return f"Edit({self.start}:{self.end}, {len(self.new_lines)} lines)"


def detect_newline(text: str) -> str:
    return '\r\n' if '\r\n' in text else '\n'


def split_lines(text: str) -> List[str]:
    return text.replace('\r\n', '\n').split('\n')


def comment_bounds(lines: List[str], declaration):
    """Locate the Javadoc block above a declaration.

    Returns:
        tuple: (start index, end index) of the lines holding the start and end
        tokens, or None when the declaration has no usable block
    """
    declaration_index = declaration.line - 1
    if declaration.comment_line is not None:
        start = declaration.comment_line - 1
    else:
        start = find_comment_start(lines, declaration.line)
    if start is None or start > declaration_index:
        return None
    if not lines[start].strip().startswith(START_JAVADOC):
        return None

    end = find_comment_end(lines, start, declaration_index + 1)
    if end is None or end >= declaration_index:
        return None
    return start, end


def edit_for_declaration(lines: List[str], declaration, context: ReconcileContext) -> Optional[Edit]:
    """Compute the edit that gives one declaration its fixed comment.

    The edit covers the old block and any comment lines between it and the
    declaration; those lines are written back unchanged after the new block,
    as is text following the end token on its line.

    Returns:
        Edit, or None when nothing changes
    """
    declaration_index = declaration.line - 1
    if declaration_index < 0 or declaration_index >= len(lines):
        raise ReconciliationError(f"Line {declaration.line} is outside the file", declaration=declaration.qualified_name)
    indent = detect_indentation(lines[declaration_index])

    raw_block = ''
    start = declaration_index
    trailing, following = '', []
    if declaration.has_comment:
        bounds = comment_bounds(lines, declaration)
        if bounds is None:
            logger.debug(f"Skipping {declaration.qualified_name}: its comment shares a line with code")
            return None
        start, end = bounds
        raw_block = extract_preceding_comment(lines, declaration.line, start)
        trailing, _ = extract_trailing_text(raw_block)
        following = lines[end + 1:declaration_index]

    draft = reconcile_comment(raw_block, declaration, indent, context)
    if draft is None:
        return None

    new_lines = assemble(indent, draft)
    if trailing.strip():
        new_lines[-1] += trailing
    new_lines.extend(following)

    if new_lines == lines[start:declaration_index]:
        return None
    return Edit(start, declaration_index, new_lines, declaration)


def compute_edits(lines: List[str], declarations, context: ReconcileContext) -> List[Edit]:
    """Compute the edits for every declaration of a file, in line order.

    Raises:
        ReconciliationError: If any declaration cannot be handled
    """
    edits = []
    seen_lines = set()
    for declaration in sorted(declarations, key=lambda d: d.line):
        if declaration.line in seen_lines:
            logger.debug(f"Skipping {declaration.qualified_name}: another declaration starts on line {declaration.line}")
            continue
        seen_lines.add(declaration.line)

        try:
            edit = edit_for_declaration(lines, declaration, context)
        except ReconciliationError:
            raise
        except Exception as e:
            raise ReconciliationError(f"Could not fix comment: {e}", declaration=declaration.qualified_name) from e
        if edit is not None:
            edits.append(edit)
    return edits


def apply_edits(lines: List[str], edits: List[Edit]) -> List[str]:
    """Apply non-overlapping edits in a single pass over the lines."""
    result = []
    position = 0
    for edit in sorted(edits, key=lambda e: e.start):
        if edit.start < position:
            raise ReconciliationError("Overlapping comment edits", declaration=edit.declaration)
        result.extend(lines[position:edit.start])
        result.extend(edit.new_lines)
        position = edit.end
    result.extend(lines[position:])
    return result


def process_declarations_in_file(source_text: str, declarations, config, api_diff=None, resolver=None,
                                 file: Optional[str] = None):
    """Fix the comments of every declaration of one file.

    Args:
        source_text: Content of the Java file
        declarations: Declarations of the file, from the parse front end
        config: FixConfig
        api_diff: ApiDiff, or None for no report
        resolver: ClassIndex used for qualification and inheritance
        file: File name used in warnings

    Returns:
        tuple: (new text, whether it differs from source_text)

    Raises:
        ReconciliationError: The file is left as it is
    """
    declarations = list(declarations)
    context = ReconcileContext(config, api_diff, resolver, stamped_types_for(declarations, config), file)
    lines = split_lines(source_text)

    edits = compute_edits(lines, declarations, context)
    if not edits:
        return source_text, False

    new_text = detect_newline(source_text).join(apply_edits(lines, edits))
    logger.debug(f"{len(edits)} comment(s) changed in {file or 'source'}")
    return new_text, new_text != source_text


def read_java_file(file_path, encoding='utf-8'):
    """Read a Java file, keeping its line terminators.

    Raises:
        SourceParseError: If the file cannot be read or decoded
    """
    try:
        with open(file_path, 'r', encoding=encoding, newline='') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceParseError(f"Could not read file: {e}", file=file_path) from e


def write_java_file(file_path, content, encoding='utf-8'):
    """Replace a file's content through a temporary file in the same directory.

    Raises:
        FileWriteError: If the file cannot be written; the original is kept
    """
    directory = os.path.dirname(os.path.abspath(file_path))
    temp_path = None
    try:
        fd, temp_path = tempfile.mkstemp(prefix='.javadoc-fix-', suffix='.java', dir=directory)
        with os.fdopen(fd, 'w', encoding=encoding, newline='') as f:
            f.write(content)
        shutil.copymode(file_path, temp_path)
        os.replace(temp_path, file_path)
    except (OSError, UnicodeEncodeError) as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.remove(temp_path)
        raise FileWriteError(f"Could not write file: {e}", file=file_path) from e


def fix_java_file(file_path, config, api_diff=None, class_index=None, encoding='utf-8', dry_run=False) -> bool:
    """Parse, fix and write back one Java file.

    Args:
        file_path: Path to the Java file
        config: FixConfig
        api_diff: ApiDiff, or None for no report
        class_index: ClassIndex shared by the run
        encoding: Source encoding
        dry_run: Compute the changes without writing them

    Returns:
        bool: True if the file was (or, in a dry run, would be) changed
    """
    java_content = read_java_file(file_path, encoding)
    try:
        parsed = parse_java_source(java_content, class_index)
    except SourceParseError as e:
        e.file = file_path
        raise

    new_content, changed = process_declarations_in_file(java_content, parsed.declarations, config, api_diff,
                                                        parsed.class_index, file=file_path)
    if changed and not dry_run:
        write_java_file(file_path, new_content, encoding)
    return changed
