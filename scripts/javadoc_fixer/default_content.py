#!/usr/bin/env python3
"""
Default text for comments and tags that are missing.
"""

import html

from constants import MAX_CONSTANT_VALUE_LENGTH, TRUNCATED_MARKER
from declarations import TYPE_KIND, FIELD_KIND, METHOD_KIND
from type_resolver import ClassIndex


def default_type_body(type_declaration) -> str:
    """'<p>[Abstract ]Name class.</p>' or '<p>Name interface.</p>'."""
    prefix = 'Abstract ' if type_declaration.is_abstract else ''
    noun = 'interface' if type_declaration.is_interface else 'class'
    return f"<p>{prefix}{type_declaration.name} {noun}.</p>"


def default_method_body(method) -> str:
    """Constructor, getter/setter or plain name sentence for a method."""
    if method.is_constructor:
        return f"<p>Constructor for {method.name}.</p>"

    name = method.name
    if len(name) > 3 and (name.startswith('get') or name.startswith('set')):
        field = name[3].lower() + name[4:]
        declaring = method.declaring_type
        if declaring is not None and field in declaring.field_names:
            role = 'Getter' if name.startswith('get') else 'Setter'
            return f"<p>{role} for the field <code>{field}</code>.</p>"

    return f"<p>{name}.</p>"


def default_body_for(declaration) -> str:
    if declaration.kind == TYPE_KIND:
        return default_type_body(declaration)
    if declaration.kind == METHOD_KIND:
        return default_method_body(declaration)
    if declaration.kind == FIELD_KIND:
        return default_field_comment(declaration)
    raise ValueError(f"Unknown declaration kind: {declaration.kind}")


def default_tag_value_for(java_type, resolver: ClassIndex) -> str:
    """Describe a parameter or return type, e.g. 'a int.' or 'a {@link java.lang.String} object.'.

    Args:
        java_type: JavaType to describe
        resolver: ClassIndex used to decide whether the type can be linked

    Returns:
        str: Tag value text
    """
    if java_type.is_primitive and not java_type.is_type_variable:
        if java_type.is_array:
            return f"an array of {java_type.name}."
        return f"a {java_type.name}."

    label = java_type.qualified_name
    if not java_type.is_type_variable:
        info = resolver.resolve_class(java_type.qualified_name)
        if info is not None:
            label = "{@link " + info.name.replace('$', '.') + "}"

    if java_type.is_array:
        return f"an array of {label} objects."
    return f"a {label} object."


def type_variable_value(name: str) -> str:
    return f"a {name} object."


def _escape(value: str) -> str:
    return html.escape(value, quote=False).replace('"', '&quot;')


def constant_string_value(initializer: str) -> str:
    """Join the literal pieces of a String constant initializer.

    Quotes and '+' concatenation tokens are dropped; a piece ending with a
    backslash keeps the quote it escapes.
    """
    value = []
    for line in initializer.split('\n'):
        piece = ''
        for char in line.strip():
            if char in '"\r':
                if piece:
                    value.append(_finish_piece(piece))
                piece = ''
            else:
                piece += char
        if piece:
            value.append(_finish_piece(piece))
    return ''.join(part for part in value if part is not None)


def _finish_piece(piece: str):
    if piece.strip() == '+':
        return None
    if piece.strip().endswith('\\'):
        return piece + '"'
    return piece


def default_field_comment(field) -> str:
    """Text of the single-line constant comment, without the comment tokens.

    Example: 'Constant <code>MAX=10</code>'
    """
    text = f"Constant <code>{field.name}"
    initializer = field.initializer
    if initializer and field.type is not None and not field.type.is_array:
        if field.type.is_primitive:
            text += "=" + _escape(initializer.strip())
        elif field.type.qualified_name == 'java.lang.String':
            value = _escape(constant_string_value(initializer))
            if len(value) < MAX_CONSTANT_VALUE_LENGTH:
                text += '="' + value + '"'
            else:
                text += '="' + value[:MAX_CONSTANT_VALUE_LENGTH - 1] + '"' + TRUNCATED_MARKER
    return text + "</code>"
