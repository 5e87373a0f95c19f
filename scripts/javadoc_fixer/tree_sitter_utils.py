#!/usr/bin/env python3
"""
Tree-sitter utilities for parsing Java code.
Handles AST operations and node extraction.
"""

import re
import sys
from tree_sitter import Language, Parser

from constants import START_JAVADOC
from logger import get_logger

logger = get_logger(__name__)

MODIFIER_KEYWORDS = ['public', 'private', 'protected', 'static', 'final', 'abstract', 'synchronized',
                     'native', 'strictfp', 'default', 'transient', 'volatile', 'sealed', 'non-sealed']
ANNOTATION_TYPES = ['marker_annotation', 'annotation']
TYPE_DECLARATION_TYPES = ['class_declaration', 'interface_declaration', 'enum_declaration',
                          'record_declaration', 'annotation_type_declaration']
COMMENT_TYPES = ['block_comment', 'line_comment', 'comment']

_GENERIC_ARGUMENTS = re.compile(r'<.*>', re.DOTALL)

_parser = None


def get_java_parser():
    """Get a tree-sitter parser for Java (created once per process)."""
    global _parser
    if _parser is not None:
        return _parser
    try:
        import tree_sitter_java
        java_language = Language(tree_sitter_java.language())
    except ImportError:
        logger.error("Could not load tree-sitter-java. Please install: pip install tree-sitter-java")
        sys.exit(1)

    _parser = Parser(java_language)
    return _parser


def get_node_text(node):
    """Extract the text content of a tree-sitter node."""
    return node.text.decode('utf-8')


def get_node_line(node):
    """Get the line number (1-indexed) of a tree-sitter node."""
    return node.start_point[0] + 1


def find_error_node(node):
    """Return the first ERROR or MISSING node below node, or None."""
    if node.type == 'ERROR' or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            found = find_error_node(child)
            if found is not None:
                return found
    return None


def get_modifiers_node(node):
    for child in node.children:
        if child.type == 'modifiers':
            return child
    return None


def extract_modifiers(node):
    """Extract modifier keywords from a declaration."""
    modifiers = []
    modifiers_node = get_modifiers_node(node)
    if modifiers_node is not None:
        for modifier_child in modifiers_node.children:
            if modifier_child.type in MODIFIER_KEYWORDS:
                modifiers.append(get_node_text(modifier_child))
    return modifiers


def extract_annotations(node):
    """Extract annotation names (without '@') from a declaration, e.g. ['Override']."""
    annotations = []
    modifiers_node = get_modifiers_node(node)
    if modifiers_node is not None:
        for child in modifiers_node.children:
            if child.type in ANNOTATION_TYPES:
                name = child.child_by_field_name('name')
                if name is not None:
                    annotations.append(get_node_text(name))
    return annotations


def split_type_node(type_node):
    """Split a type node into its erased name and array dimensions.

    Returns:
        tuple: (name without type arguments, dimensions)
    """
    if type_node.type == 'array_type':
        element = type_node.child_by_field_name('element')
        dimensions = type_node.child_by_field_name('dimensions')
        name, inner = split_type_node(element)
        return name, inner + count_dimensions(dimensions)
    if type_node.type == 'generic_type':
        for child in type_node.named_children:
            if child.type != 'type_arguments':
                return split_type_node(child)
    if type_node.type == 'annotated_type':
        for child in reversed(type_node.named_children):
            if child.type not in ANNOTATION_TYPES:
                return split_type_node(child)
    text = _GENERIC_ARGUMENTS.sub('', get_node_text(type_node))
    return ''.join(text.split()), 0


def count_dimensions(node):
    if node is None:
        return 0
    return get_node_text(node).count('[')


def extract_parameters(method_node):
    """Extract parameter information from a method or constructor declaration.

    Returns:
        list: dicts with 'name', 'type' (erased type name) and 'dimensions'
    """
    params = []
    formal_parameters = method_node.child_by_field_name('parameters')
    if formal_parameters is None:
        return params

    for child in formal_parameters.named_children:
        if child.type == 'formal_parameter':
            type_node = child.child_by_field_name('type')
            name_node = child.child_by_field_name('name')
            if type_node is None or name_node is None:
                continue
            type_name, dimensions = split_type_node(type_node)
            dimensions += count_dimensions(child.child_by_field_name('dimensions'))
            params.append({'type': type_name, 'name': get_node_text(name_node), 'dimensions': dimensions})
        elif child.type == 'spread_parameter':
            # Varargs: the type is followed by '...' and a variable_declarator
            type_name, dimensions, name = None, 1, None
            for spread_child in child.named_children:
                if spread_child.type == 'variable_declarator':
                    name_node = spread_child.child_by_field_name('name')
                    name = get_node_text(name_node) if name_node is not None else None
                elif spread_child.type == 'identifier':
                    name = get_node_text(spread_child)
                elif spread_child.type not in ANNOTATION_TYPES and spread_child.type != 'modifiers' \
                        and type_name is None:
                    type_name, inner = split_type_node(spread_child)
                    dimensions += inner
            if type_name and name:
                params.append({'type': type_name, 'name': name, 'dimensions': dimensions})

    return params


def extract_return_type(method_node):
    """Extract the return type of a method declaration as (name, dimensions)."""
    type_node = method_node.child_by_field_name('type')
    if type_node is None:
        return 'void', 0
    return split_type_node(type_node)


def extract_type_parameters(node):
    """Names of the generic type parameters of a declaration, e.g. ['K', 'V']."""
    names = []
    type_parameters = node.child_by_field_name('type_parameters')
    if type_parameters is None:
        for child in node.children:
            if child.type == 'type_parameters':
                type_parameters = child
                break
    if type_parameters is None:
        return names
    for child in type_parameters.named_children:
        if child.type == 'type_parameter':
            for part in child.named_children:
                if part.type in ('type_identifier', 'identifier'):
                    names.append(get_node_text(part))
                    break
    return names


def extract_throws(method_node):
    """Exception type names listed in the throws clause of a method."""
    for child in method_node.children:
        if child.type == 'throws':
            return [split_type_node(type_node)[0] for type_node in child.named_children
                    if type_node.type not in ANNOTATION_TYPES]
    return []


def extract_super_types(type_node):
    """Return (superclass name or None, [interface names]) of a type declaration."""
    superclass = None
    interfaces = []
    for child in type_node.children:
        if child.type == 'superclass':
            for part in child.named_children:
                superclass = split_type_node(part)[0]
        elif child.type in ('super_interfaces', 'extends_interfaces'):
            for part in child.named_children:
                if part.type == 'type_list':
                    interfaces.extend(split_type_node(item)[0] for item in part.named_children)
                else:
                    interfaces.append(split_type_node(part)[0])
    return superclass, interfaces


def get_identifier_from_node(node):
    """Extract identifier (name) from a node.

    Args:
        node: Tree-sitter node

    Returns:
        str: Identifier name or None
    """
    name = node.child_by_field_name('name')
    if name is not None:
        return get_node_text(name)
    for child in node.children:
        if child.type == 'identifier':
            return get_node_text(child)
    return None


def find_preceding_javadoc(node):
    """Find the Javadoc block comment written just before a declaration node.

    Line comments and plain block comments in between are skipped; any other
    node ends the search.

    Returns:
        Node: the block_comment node, or None
    """
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in COMMENT_TYPES:
        if sibling.type != 'line_comment' and get_node_text(sibling).startswith(START_JAVADOC) \
                and get_node_text(sibling) != '/**/':
            return sibling
        sibling = sibling.prev_sibling
    return None
