#!/usr/bin/env python3
"""
Tag reconciliation: decides what the comment of one declaration should be.

Each declaration is in one of three states:

- NO_COMMENT: everything is synthesized (SYNTHESIZE_ALL)
- HAS_COMMENT_NO_TAGS: the body is kept and tags are synthesized (SYNTHESIZE_TAGS_ONLY)
- HAS_COMMENT_HAS_TAGS: existing tags are fixed in place and missing ones appended (MERGE)

Existing tags keep their verbatim text and their order. A stub tag such as
'@param name' gets a default value; a tag that no longer applies is dropped.
Missing tags follow in a fixed order: params, type params, return, throws,
author, version, since.
"""

import re
from typing import Iterable, List, Optional, Set

from api_diff import ApiDiff
from comment_assembler import CommentDraft
from constants import (
    AUTHOR_TAG,
    END_JAVADOC,
    LINK_TAG,
    PARAM_TAG,
    RETURN_TAG,
    SEPARATOR_JAVADOC,
    SINCE_TAG,
    START_JAVADOC,
    THROWS_TAG,
    VERSION_TAG,
)
from declarations import FIELD_KIND, METHOD_KIND, TYPE_KIND
from default_content import (
    default_body_for,
    default_field_comment,
    default_tag_value_for,
    type_variable_value,
)
from inherited_doc import collapse_inherited, inherited_shorthand, is_inherited
from javadoc_parser import parse_tags
from logger import get_logger
from text_region import align_indentation, collapse_whitespace, extract_description, remove_last_empty_lines
from type_resolver import ClassIndex, qualify_in, resolve_in

logger = get_logger(__name__)

NO_COMMENT = 'NO_COMMENT'
HAS_COMMENT_NO_TAGS = 'HAS_COMMENT_NO_TAGS'
HAS_COMMENT_HAS_TAGS = 'HAS_COMMENT_HAS_TAGS'

_LINK_START = re.compile(r'\{@link\s')


class ReconcileContext:
    """Everything reconciliation reads besides the declaration itself.

    Built once per file before any declaration is processed and never
    changed afterwards.
    """

    def __init__(self, config, api_diff: Optional[ApiDiff] = None, resolver: Optional[ClassIndex] = None,
                 stamped_types: Iterable[str] = (), file: Optional[str] = None):
        self.config = config
        self.api_diff = api_diff if api_diff is not None else ApiDiff.disabled()
        self.resolver = resolver if resolver is not None else ClassIndex()
        self.stamped_types = frozenset(stamped_types)
        self.file = file

    @property
    def uses_api_diff(self) -> bool:
        return self.api_diff.enabled and not self.config.ignore_api_diff

    def warn(self, message: str, declaration):
        logger.warning(message, file=self.file, line=declaration.line)


def comment_state(declaration) -> str:
    if not declaration.has_comment:
        return NO_COMMENT
    if not declaration.tags:
        return HAS_COMMENT_NO_TAGS
    return HAS_COMMENT_HAS_TAGS


def is_in_scope(declaration, config) -> bool:
    """Whether the configuration asks for this declaration's comment to be fixed."""
    declaring = declaration.declaring_type
    in_interface = declaring is not None and declaring.is_interface

    if declaration.kind == TYPE_KIND:
        return config.fix_class_comment and (in_interface or config.is_in_level(declaration.modifiers))
    if declaration.kind == FIELD_KIND:
        if not config.fix_field_comment:
            return False
        return in_interface or (declaration.is_static and config.is_in_level(declaration.modifiers))
    if declaration.kind == METHOD_KIND:
        return config.fix_method_comment and (in_interface or config.is_in_level(declaration.modifiers))
    raise ValueError(f"Unknown declaration kind: {declaration.kind}")


def stamped_types_for(declarations, config) -> frozenset:
    """Types that carry @since once fixed, when no API diff report is used.

    Methods of these types do not get their own @since.
    """
    stamped = set()
    for declaration in declarations:
        if declaration.kind != TYPE_KIND:
            continue
        has_since = any(tag.name == SINCE_TAG and tag.params for tag in declaration.tags)
        if has_since or (config.fix_tag(SINCE_TAG) and is_in_scope(declaration, config)):
            stamped.add(declaration.qualified_name)
    return frozenset(stamped)


def replace_link_tags(text: str, declaration, resolver: ClassIndex) -> str:
    """Qualify the class names of {@link ...} inline tags.

    '{@link Foo#bar()}' becomes '{@link com.example.Foo#bar()}' when Foo can be
    resolved from the declaration; unknown names are only trimmed. Members of
    the same class ('{@link #bar()}') and unterminated tags are left alone.
    """
    context_type = declaration if declaration.kind == TYPE_KIND else declaration.declaring_type
    result = []
    position = 0

    for match in _LINK_START.finditer(text):
        name_start = match.end()
        if name_start < position:
            continue
        end = text.find('}', name_start)
        if end < 0:
            break
        result.append(text[position:name_start])

        link = text[name_start:end]
        hash_index = link.find('#')
        target = link[:hash_index] if hash_index >= 0 else link
        target, _, label = target.strip().partition(' ')
        if target:
            qualified = qualify_in(resolver, target, context_type)
            result.append(qualified.replace('$', '.') if qualified else target)
            if label.strip():
                result.append(' ' + label.strip())
        if hash_index >= 0:
            result.append(link[hash_index:].strip())
        position = end

    result.append(text[position:])
    return ''.join(result)


class _Reconciler:
    """Builds the draft comment of one declaration."""

    def __init__(self, raw_block: str, declaration, indent: str, context: ReconcileContext):
        self.raw_block = raw_block
        self.declaration = declaration
        self.indent = indent
        self.context = context
        self.config = context.config
        self.resolver = context.resolver

    def line(self, text: str) -> str:
        return self.indent + SEPARATOR_JAVADOC + text

    def tag_line(self, name: str, value: str) -> str:
        return self.line(f"@{name} {value}")

    def fix_links(self, text: str) -> str:
        if self.config.fix_tag(LINK_TAG):
            return replace_link_tags(text, self.declaration, self.resolver)
        return text

    def draft(self) -> Optional[CommentDraft]:
        kind = self.declaration.kind
        if kind == TYPE_KIND:
            return self.type_draft()
        if kind == FIELD_KIND:
            return self.field_draft()
        if kind == METHOD_KIND:
            return self.method_draft()
        raise ValueError(f"Unknown declaration kind: {kind}")

    # Body

    def body(self, default: str) -> List[str]:
        if comment_state(self.declaration) == NO_COMMENT:
            return [self.line(default)]
        description = remove_last_empty_lines(extract_description(self.raw_block))
        if not description.replace('*', '').strip():
            return [self.line(default)]
        return [self.fix_links(line.rstrip()) for line in align_indentation(description, self.indent)]

    def existing_tags(self):
        if comment_state(self.declaration) == NO_COMMENT:
            return parse_tags('', self.declaration, self.indent)
        return parse_tags(self.raw_block, self.declaration, self.indent)

    # Types

    def type_draft(self) -> CommentDraft:
        tag_set = self.existing_tags()
        tags = []
        for _, _, text in tag_set.entries:
            tags.extend(self.fix_links(text).split('\n'))

        if self.config.fix_tag(AUTHOR_TAG) and not tag_set.has_name(AUTHOR_TAG):
            tags.append(self.tag_line(AUTHOR_TAG, self.config.default_author))
        if self.config.fix_tag(VERSION_TAG) and not tag_set.has_name(VERSION_TAG):
            tags.append(self.tag_line(VERSION_TAG, self.config.default_version))
        if self.config.fix_tag(SINCE_TAG) and not tag_set.has_name(SINCE_TAG):
            if not self.context.uses_api_diff or self.context.api_diff.is_new_type(self.declaration.qualified_name):
                tags.append(self.tag_line(SINCE_TAG, self.config.default_since))

        return CommentDraft(self.body(default_body_for(self.declaration)), tags)

    # Fields

    def field_draft(self) -> Optional[CommentDraft]:
        if comment_state(self.declaration) != NO_COMMENT:
            return None
        return CommentDraft.one_line(f"{START_JAVADOC} {default_field_comment(self.declaration)} {END_JAVADOC}")

    # Methods

    def method_draft(self) -> CommentDraft:
        method = self.declaration
        if is_inherited(method, self.resolver, self.config.strict_inherited_signature):
            if comment_state(method) == NO_COMMENT:
                return inherited_shorthand()
            return collapse_inherited(self.raw_block, method, self.indent)

        tag_set = self.existing_tags()
        handled_throws: Set[str] = set()
        tags = []
        for kind, key, text in tag_set.entries:
            text = self.fix_links(text)
            if kind == PARAM_TAG:
                text = self.fix_param_tag(key, text)
            elif kind == RETURN_TAG:
                text = self.fix_return_tag(text)
            elif kind == THROWS_TAG:
                text = self.fix_throws_tag(key, text, handled_throws)
            if text:
                tags.extend(text.split('\n'))

        tags.extend(self.missing_method_tags(tag_set, handled_throws))
        return CommentDraft(self.body(default_body_for(method)), tags)

    def is_stub(self, text: str, head: str) -> bool:
        return collapse_whitespace(text.strip()).endswith(head)

    def is_throws_stub(self, text: str, name: str) -> bool:
        return self.is_stub(text, f"@{THROWS_TAG} {name}") or self.is_stub(text, f"@exception {name}")

    def param_value(self, key: str) -> Optional[str]:
        for parameter in self.declaration.parameters:
            if parameter.name == key:
                return default_tag_value_for(parameter.type, self.resolver)
        for type_parameter in self.declaration.type_parameters:
            if key == f"<{type_parameter}>":
                return type_variable_value(type_parameter)
        return None

    def fix_param_tag(self, key: str, text: str) -> str:
        if not self.config.fix_tag(PARAM_TAG):
            return text
        value = self.param_value(key)
        if value is None:
            self.context.warn(f"Fixed unknown param '{key}' defined in {self.declaration.qualified_name}",
                              self.declaration)
            return ''
        if self.is_stub(text, f"@{PARAM_TAG} {key}"):
            return f"{text} {value}"
        return text

    def fix_return_tag(self, text: str) -> str:
        if not self.config.fix_tag(RETURN_TAG):
            return text
        method = self.declaration
        if not method.returns_value:
            logger.debug(f"Removing @return from {method.qualified_name}, it returns nothing")
            return ''
        if self.is_stub(text, f"@{RETURN_TAG}"):
            return f"{text} {default_tag_value_for(method.return_type, self.resolver)}"
        return text

    def fix_throws_tag(self, key: str, text: str, handled: Set[str]) -> str:
        """Qualify, keep or drop one existing throws tag.

        Args:
            key: Exception name as written in the tag
            text: Verbatim tag text
            handled: Exception names already documented, updated in place

        Returns:
            str: The tag text to emit, or '' to drop it
        """
        if not self.config.fix_tag(THROWS_TAG):
            return text
        method = self.declaration

        for exception in method.exceptions:
            qualified = exception.qualified_name
            if key in (qualified, exception.name) or qualified.endswith('.' + key):
                text = _replace_tag_target(text, key, qualified)
                if self.is_throws_stub(text, qualified):
                    text += ' if any.'
                handled.add(qualified)
                return text

        info = resolve_in(self.resolver, key, method.declaring_type)
        if info is not None:
            if self.resolver.is_unchecked(info):
                handled.add(info.name)
                return _replace_tag_target(text, key, info.name)
            if self.resolver.is_throwable(info):
                logger.debug(f"Removing '{key}'; Throwable not specified by {method.qualified_name} "
                             f"and it is not a RuntimeException.")
            else:
                logger.debug(f"Removing '{key}' from {method.qualified_name}; it is not a Throwable.")
            return ''

        if self.config.remove_unknown_throws:
            self.context.warn(f"Ignoring unknown throws '{key}' defined on {method.qualified_name}", method)
            return ''

        self.context.warn(f"Found unknown throws '{key}' defined on {method.qualified_name}", method)
        if self.is_throws_stub(text, key):
            text += ' if any.'
        handled.add(key)
        return text

    def missing_method_tags(self, tag_set, handled_throws: Set[str]) -> List[str]:
        method = self.declaration
        tags = []

        if self.config.fix_tag(PARAM_TAG):
            for parameter in method.parameters:
                if parameter.name not in tag_set.params:
                    tags.append(self.tag_line(PARAM_TAG, f"{parameter.name} "
                                              f"{default_tag_value_for(parameter.type, self.resolver)}"))
            for type_parameter in method.type_parameters:
                if f"<{type_parameter}>" not in tag_set.params:
                    tags.append(self.tag_line(PARAM_TAG, f"<{type_parameter}> {type_variable_value(type_parameter)}"))

        if self.config.fix_tag(RETURN_TAG) and tag_set.return_text is None and method.returns_value:
            tags.append(self.tag_line(RETURN_TAG, default_tag_value_for(method.return_type, self.resolver)))

        if self.config.fix_tag(THROWS_TAG):
            for exception in method.exceptions:
                if exception.qualified_name not in handled_throws:
                    tags.append(self.tag_line(THROWS_TAG, f"{exception.qualified_name} if any."))

        if self.config.fix_tag(SINCE_TAG) and not tag_set.has_name(SINCE_TAG) and self.method_is_new():
            tags.append(self.tag_line(SINCE_TAG, self.config.default_since))

        return tags

    def method_is_new(self) -> bool:
        method = self.declaration
        declaring = method.declaring_type
        declaring_name = declaring.qualified_name if declaring is not None else ''
        if self.context.uses_api_diff:
            return self.context.api_diff.is_new_method(declaring_name, method)
        return declaring_name not in self.context.stamped_types


def _replace_tag_target(text: str, key: str, qualified: str) -> str:
    """Replace the exception name right after @throws/@exception."""
    pattern = re.compile(r'(@(?:throws|exception)\s+)' + re.escape(key) + r'(?=\s|$)')
    return pattern.sub(lambda match: match.group(1) + qualified, text, count=1)


def reconcile_comment(raw_block: str, declaration, indent: str, context: ReconcileContext) -> Optional[CommentDraft]:
    """Compute the comment a declaration should carry.

    Args:
        raw_block: Existing comment block above the declaration ('' if none)
        declaration: Declaration to document
        indent: Indentation of the declaration line
        context: ReconcileContext for the file

    Returns:
        CommentDraft, or None when the declaration is left untouched
    """
    if not is_in_scope(declaration, context.config):
        return None
    return _Reconciler(raw_block, declaration, indent, context).draft()
