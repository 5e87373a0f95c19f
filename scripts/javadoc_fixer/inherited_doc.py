#!/usr/bin/env python3
"""
Detection of overriding methods and collapsing of their comments to {@inheritDoc}.
"""

from typing import List

from comment_assembler import CommentDraft, assemble, separator_line
from constants import INHERITED_JAVADOC, INHERITED_TAG, OVERRIDE_ANNOTATIONS
from declarations import UNKNOWN_TAG
from javadoc_parser import parse_tags
from text_region import align_indentation, extract_description, has_inherited_tag, remove_last_empty_lines


def _same_type(declared: str, actual: str) -> bool:
    if declared == actual:
        return True
    # Index entries may use simple names
    return declared.rsplit('.', 1)[-1] == actual.rsplit('.', 1)[-1]


def parameters_match(declared_types, method, strict: bool = True) -> bool:
    """Compare the parameter types of a supertype method with those of method.

    Args:
        declared_types: Parameter type names of the supertype method
        method: MethodDeclaration being checked
        strict: Compare every parameter; otherwise only the last one decides

    Returns:
        bool: True if the signatures are considered the same
    """
    actual_types = [str(parameter.type) for parameter in method.parameters]
    if len(declared_types) != len(actual_types):
        return False
    if not actual_types:
        return True
    if strict:
        return all(_same_type(declared, actual) for declared, actual in zip(declared_types, actual_types))
    return _same_type(declared_types[-1], actual_types[-1])


def is_inherited(method, resolver, strict: bool = True) -> bool:
    """Whether method overrides or implements a supertype method.

    An @Override annotation is enough. Otherwise every known superclass and
    interface of the declaring type is searched for a method with the same
    name and parameter types.
    """
    if any(annotation in OVERRIDE_ANNOTATIONS for annotation in method.annotations):
        return True
    if method.is_constructor or method.is_static or method.declaring_type is None:
        return False

    info = resolver.resolve_class(method.declaring_type.qualified_name)
    if info is None:
        return False

    for parent in resolver.supertypes(info):
        for candidate in parent.declared_methods(method.name):
            if parameters_match(candidate.parameter_types, method, strict):
                return True
    return False


def inherited_shorthand() -> CommentDraft:
    return CommentDraft.one_line(INHERITED_JAVADOC)


def collapse_inherited(raw_block: str, method, indent: str) -> CommentDraft:
    """Rewrite the comment of an inherited method around {@inheritDoc}.

    Param, return and throws tags are dropped since they come from the
    supertype; other tags are kept. The result is the one-line shorthand
    whenever nothing but the marker would remain.

    Args:
        raw_block: Existing comment block (may be empty)
        method: MethodDeclaration detected as inherited
        indent: Indentation of the method line

    Returns:
        CommentDraft
    """
    description = remove_last_empty_lines(extract_description(raw_block)) if raw_block else ''
    if not description.replace('*', '').strip():
        return inherited_shorthand()

    tag_set = parse_tags(raw_block, method, indent)
    kept_tags = []
    for kind, _, text in tag_set.entries:
        if kind == UNKNOWN_TAG:
            kept_tags.extend(text.split('\n'))

    if has_inherited_tag(description) and not kept_tags:
        return inherited_shorthand()

    body: List[str] = []
    if INHERITED_TAG not in description:
        body.append(indent + ' * ' + INHERITED_TAG)
        body.append(separator_line(indent))
    body.extend(align_indentation(description, indent))

    draft = CommentDraft(body, kept_tags)
    if has_inherited_tag('\n'.join(assemble(indent, draft))):
        return inherited_shorthand()
    return draft
