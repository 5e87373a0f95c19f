#!/usr/bin/env python3
"""
Main Java file parsing module.
Parses Java files into the declarations the fixer works on: types, fields,
methods and constructors, each with its existing Javadoc and doclet tags.
"""

import os
from typing import List, Optional

from constants import PRIMITIVE_TYPES, VOID_TYPE
from declarations import FieldDeclaration, JavaType, MethodDeclaration, Parameter, TypeDeclaration
from errors import SourceParseError
from javadoc_parser import parse_existing_javadoc
from logger import get_logger
from tree_sitter_utils import (
    TYPE_DECLARATION_TYPES,
    count_dimensions,
    extract_annotations,
    extract_modifiers,
    extract_parameters,
    extract_return_type,
    extract_super_types,
    extract_throws,
    extract_type_parameters,
    find_error_node,
    find_preceding_javadoc,
    get_identifier_from_node,
    get_java_parser,
    get_node_line,
    get_node_text,
    split_type_node,
)
from type_resolver import ClassIndex, ClassInfo, MethodInfo

logger = get_logger(__name__)

TYPE_KINDS = {
    'class_declaration': 'class',
    'interface_declaration': 'interface',
    'enum_declaration': 'enum',
    'record_declaration': 'record',
    'annotation_type_declaration': 'annotation',
}

_IMPLICIT_SUPERCLASSES = {
    'enum': 'java.lang.Enum',
    'record': 'java.lang.Record',
}


class ParsedSource:
    """Result of parsing one compilation unit."""

    def __init__(self, declarations, lines, package: str, imports, class_index: ClassIndex):
        self.declarations = list(declarations)
        self.lines = lines
        self.package = package
        self.imports = list(imports)
        self.class_index = class_index

    def __repr__(self):
        return f"ParsedSource(package={self.package!r}, declarations={len(self.declarations)})"


class _Scope:
    """Name resolution context inside one type body."""

    def __init__(self, index: ClassIndex, package: str, imports, enclosing=(), type_variables=()):
        self.index = index
        self.package = package
        self.imports = tuple(imports)
        self.enclosing = tuple(enclosing)
        self.type_variables = frozenset(type_variables)

    def nested(self, qualified_name: str, type_variables=()) -> '_Scope':
        return _Scope(self.index, self.package, self.imports, (qualified_name,) + self.enclosing,
                      self.type_variables | frozenset(type_variables))

    def with_type_variables(self, type_variables) -> '_Scope':
        return _Scope(self.index, self.package, self.imports, self.enclosing,
                      self.type_variables | frozenset(type_variables))

    def qualify(self, name: str) -> str:
        qualified = self.index.qualify(name, self.package, self.imports, self.enclosing)
        return qualified or name

    def java_type(self, name: str, dimensions: int = 0) -> JavaType:
        if name in PRIMITIVE_TYPES or name == VOID_TYPE:
            return JavaType(name, name, dimensions)
        if name in self.type_variables:
            return JavaType(name, name, dimensions, is_type_variable=True)
        return JavaType(name, self.qualify(name), dimensions)


def extract_package(root_node) -> str:
    for child in root_node.named_children:
        if child.type == 'package_declaration':
            for part in child.named_children:
                if part.type in ('scoped_identifier', 'identifier'):
                    return get_node_text(part)
    return ''


def extract_imports(root_node) -> List[str]:
    """Import declarations as written, e.g. ['java.util.List', 'java.io.*', 'static a.B.c']."""
    imports = []
    for child in root_node.named_children:
        if child.type != 'import_declaration':
            continue
        text = get_node_text(child).strip()
        if text.startswith('import'):
            text = text[len('import'):]
        text = ''.join(text.rstrip(';').split())
        if text.startswith('static'):
            text = 'static ' + text[len('static'):]
        imports.append(text)
    return imports


def _body_members(type_node):
    body = type_node.child_by_field_name('body')
    if body is None:
        return []
    members = []
    for child in body.named_children:
        if child.type == 'enum_body_declarations':
            members.extend(child.named_children)
        else:
            members.append(child)
    return members


def _record_components(type_node) -> List[str]:
    parameters = type_node.child_by_field_name('parameters')
    if parameters is None:
        return []
    names = []
    for child in parameters.named_children:
        name = child.child_by_field_name('name')
        if name is not None:
            names.append(get_node_text(name))
    return names


def _declarators(field_node):
    return [child for child in field_node.children_by_field_name('declarator')
            if child.type == 'variable_declarator']


def _comment_parts(node):
    """Return (description, tags, 1-indexed line) of the Javadoc above node."""
    javadoc_node = find_preceding_javadoc(node)
    if javadoc_node is None:
        return None, [], None
    parsed = parse_existing_javadoc(get_node_text(javadoc_node))
    return parsed['description'] or '', parsed['tags'], get_node_line(javadoc_node)


def _register_types(type_node, prefix: str, index: ClassIndex):
    """Make every type of the file known by name before any signature is resolved."""
    name = get_identifier_from_node(type_node)
    if not name:
        return
    qualified_name = f"{prefix}.{name}" if prefix else name
    index.add(ClassInfo(qualified_name, is_interface=TYPE_KINDS[type_node.type] in ('interface', 'annotation')))
    for member in _body_members(type_node):
        if member.type in TYPE_DECLARATION_TYPES:
            _register_types(member, qualified_name, index)


class _DeclarationBuilder:
    """Walks the syntax tree and produces declarations in source order."""

    def __init__(self, index: ClassIndex, package: str, imports):
        self.index = index
        self.package = package
        self.imports = imports
        self.declarations = []

    def build_type(self, type_node, scope: _Scope, declaring_type: Optional[TypeDeclaration] = None):
        name = get_identifier_from_node(type_node)
        if not name:
            return
        type_kind = TYPE_KINDS[type_node.type]
        members = _body_members(type_node)

        field_names = _record_components(type_node)
        for member in members:
            if member.type in ('field_declaration', 'constant_declaration'):
                for declarator in _declarators(member):
                    field_names.append(get_identifier_from_node(declarator))

        comment, tags, comment_line = _comment_parts(type_node)
        type_declaration = TypeDeclaration(
            name, get_node_line(type_node),
            type_kind=type_kind,
            package=self.package,
            field_names=field_names,
            imports=self.imports,
            modifiers=extract_modifiers(type_node),
            annotations=extract_annotations(type_node),
            tags=tags,
            comment=comment,
            comment_line=comment_line,
            declaring_type=declaring_type,
        )
        inner = scope.nested(type_declaration.qualified_name, extract_type_parameters(type_node))

        superclass, interfaces = extract_super_types(type_node)
        if superclass:
            type_declaration.superclass = inner.java_type(superclass)
        type_declaration.interfaces = tuple(inner.java_type(interface) for interface in interfaces)
        self.declarations.append(type_declaration)

        methods = []
        for member in members:
            if member.type in ('field_declaration', 'constant_declaration'):
                self.build_fields(member, inner, type_declaration)
            elif member.type in ('method_declaration', 'constructor_declaration'):
                methods.append(self.build_method(member, inner, type_declaration))
            elif member.type in TYPE_DECLARATION_TYPES:
                self.build_type(member, inner, type_declaration)

        self.index.add(ClassInfo(
            type_declaration.qualified_name,
            superclass=_IMPLICIT_SUPERCLASSES.get(type_kind) or
            (str(type_declaration.superclass) if type_declaration.superclass else None),
            interfaces=[interface.qualified_name for interface in type_declaration.interfaces],
            methods=[MethodInfo(method.name, [str(parameter.type) for parameter in method.parameters])
                     for method in methods if not method.is_constructor],
            is_interface=type_declaration.is_interface,
        ))

    def build_fields(self, field_node, scope: _Scope, declaring_type: TypeDeclaration):
        type_node = field_node.child_by_field_name('type')
        if type_node is None:
            return
        type_name, dimensions = split_type_node(type_node)
        comment, tags, comment_line = _comment_parts(field_node)
        modifiers = extract_modifiers(field_node)
        annotations = extract_annotations(field_node)

        for declarator in _declarators(field_node):
            value = declarator.child_by_field_name('value')
            extra = count_dimensions(declarator.child_by_field_name('dimensions'))
            self.declarations.append(FieldDeclaration(
                get_identifier_from_node(declarator), get_node_line(field_node),
                java_type=scope.java_type(type_name, dimensions + extra),
                initializer=get_node_text(value) if value is not None else None,
                modifiers=modifiers,
                annotations=annotations,
                tags=tags,
                comment=comment,
                comment_line=comment_line,
                declaring_type=declaring_type,
            ))

    def build_method(self, method_node, scope: _Scope, declaring_type: TypeDeclaration) -> MethodDeclaration:
        type_parameters = extract_type_parameters(method_node)
        method_scope = scope.with_type_variables(type_parameters)
        is_constructor = method_node.type == 'constructor_declaration'

        parameters = [Parameter(param['name'], method_scope.java_type(param['type'], param['dimensions']))
                      for param in extract_parameters(method_node)]
        return_type = None
        if not is_constructor:
            return_name, dimensions = extract_return_type(method_node)
            dimensions += count_dimensions(method_node.child_by_field_name('dimensions'))
            return_type = method_scope.java_type(return_name, dimensions)

        comment, tags, comment_line = _comment_parts(method_node)
        method = MethodDeclaration(
            get_identifier_from_node(method_node), get_node_line(method_node),
            parameters=parameters,
            type_parameters=type_parameters,
            return_type=return_type,
            exceptions=[method_scope.java_type(name) for name in extract_throws(method_node)],
            is_constructor=is_constructor,
            modifiers=extract_modifiers(method_node),
            annotations=extract_annotations(method_node),
            tags=tags,
            comment=comment,
            comment_line=comment_line,
            declaring_type=declaring_type,
        )
        self.declarations.append(method)
        return method


def parse_java_source(java_content, class_index: Optional[ClassIndex] = None) -> ParsedSource:
    """Parse Java source and return its declarations.

    Types of the file are added to a child of class_index, so the given index
    is not modified.

    Args:
        java_content: Java source code
        class_index: ClassIndex used to qualify type names

    Returns:
        ParsedSource

    Raises:
        SourceParseError: If the source has syntax errors
    """
    parser = get_java_parser()
    tree = parser.parse(bytes(java_content, 'utf-8'))
    root = tree.root_node

    if root.has_error:
        error_node = find_error_node(root)
        line = get_node_line(error_node) if error_node is not None else None
        raise SourceParseError("Java source has syntax errors", line=line)

    package = extract_package(root)
    imports = extract_imports(root)
    index = (class_index if class_index is not None else ClassIndex()).child()

    type_nodes = [child for child in root.named_children if child.type in TYPE_DECLARATION_TYPES]
    for type_node in type_nodes:
        _register_types(type_node, package, index)

    builder = _DeclarationBuilder(index, package, imports)
    scope = _Scope(index, package, imports)
    for type_node in type_nodes:
        builder.build_type(type_node, scope)

    return ParsedSource(builder.declarations, java_content.split('\n'), package, imports, index)


def find_java_files(path) -> List[str]:
    """Collect .java files under path (or path itself when it is a file), sorted."""
    if os.path.isfile(path):
        return [path]
    java_files = []
    for directory, _, files in os.walk(path):
        for file_name in files:
            if file_name.endswith('.java'):
                java_files.append(os.path.join(directory, file_name))
    return sorted(java_files)


def index_source_roots(roots, class_index: ClassIndex, encoding: str = 'utf-8') -> int:
    """Add every type declared under the source roots to class_index.

    Files that cannot be read or parsed are skipped.

    Returns:
        int: Number of types added
    """
    count = 0
    for root in roots:
        for java_file in find_java_files(root):
            try:
                with open(java_file, 'r', encoding=encoding) as f:
                    parsed = parse_java_source(f.read(), class_index)
            except (OSError, UnicodeDecodeError, SourceParseError) as e:
                logger.debug(f"Skipping {java_file} while indexing: {e}")
                continue
            for info in parsed.class_index.own_classes():
                class_index.add(info)
                count += 1

    logger.debug(f"Indexed {count} types from {len(roots)} source root(s)")
    return count
