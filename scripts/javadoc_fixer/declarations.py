#!/usr/bin/env python3
"""
Declaration model handed from the parse front end to the fixer.

A declaration is one of three variants, told apart by its ``kind``:
TYPE_KIND (class, interface, enum, record, annotation), FIELD_KIND and
METHOD_KIND (methods and constructors). Declarations are built once per file
and are not modified afterwards.
"""

from typing import Dict, List, Optional, Tuple

from constants import PRIMITIVE_TYPES, VOID_TYPE, PARAM_TAG, RETURN_TAG, THROWS_TAG
from errors import DuplicateTagError

TYPE_KIND = 'type'
FIELD_KIND = 'field'
METHOD_KIND = 'method'

UNKNOWN_TAG = 'unknown'


class JavaType:
    """A type reference as written in source, plus its qualified form."""

    def __init__(self, name: str, qualified_name: Optional[str] = None, dimensions: int = 0,
                 is_type_variable: bool = False):
        self.name = name
        self.qualified_name = qualified_name or name
        self.dimensions = dimensions
        self.is_type_variable = is_type_variable

    @property
    def is_primitive(self) -> bool:
        return self.name in PRIMITIVE_TYPES

    @property
    def is_void(self) -> bool:
        return self.name == VOID_TYPE and self.dimensions == 0

    @property
    def is_array(self) -> bool:
        return self.dimensions > 0

    def __str__(self):
        return self.qualified_name + '[]' * self.dimensions

    def __repr__(self):
        return f"JavaType({str(self)!r})"

    def __eq__(self, other):
        if not isinstance(other, JavaType):
            return NotImplemented
        return (self.qualified_name, self.dimensions, self.is_type_variable) == \
            (other.qualified_name, other.dimensions, other.is_type_variable)

    def __hash__(self):
        return hash((self.qualified_name, self.dimensions, self.is_type_variable))


class Parameter:
    def __init__(self, name: str, java_type: JavaType):
        self.name = name
        self.type = java_type

    def __repr__(self):
        return f"Parameter({self.type} {self.name})"


class Tag:
    """An existing doclet tag: name, whitespace separated parameters and its line in the comment."""

    def __init__(self, name: str, params=(), line: Optional[int] = None):
        self.name = name
        self.params = tuple(params)
        self.line = line

    @property
    def value(self) -> str:
        return ' '.join(self.params)

    def __repr__(self):
        return f"Tag(@{self.name} {self.value})".replace(' )', ')')

    def __eq__(self, other):
        if not isinstance(other, Tag):
            return NotImplemented
        return (self.name, self.params) == (other.name, other.params)

    def __hash__(self):
        return hash((self.name, self.params))


class Declaration:
    """Attributes shared by all declaration variants."""

    kind = None

    def __init__(self, name: str, line: int, modifiers=(), annotations=(), tags=(),
                 comment: Optional[str] = None, comment_line: Optional[int] = None,
                 declaring_type: Optional['TypeDeclaration'] = None):
        self.name = name
        self.line = line
        self.modifiers = tuple(modifiers)
        self.annotations = tuple(annotations)
        self.tags = tuple(tags)
        self.comment = comment
        self.comment_line = comment_line
        self.declaring_type = declaring_type

    @property
    def has_comment(self) -> bool:
        """Whether a Javadoc block precedes the declaration."""
        return self.comment is not None

    @property
    def is_static(self) -> bool:
        return 'static' in self.modifiers

    @property
    def qualified_name(self) -> str:
        if self.declaring_type is None:
            return self.name
        return f"{self.declaring_type.qualified_name}.{self.name}"

    def __repr__(self):
        return f"{type(self).__name__}({self.qualified_name!r}, line={self.line})"


class TypeDeclaration(Declaration):
    kind = TYPE_KIND

    def __init__(self, name: str, line: int, type_kind: str = 'class', package: str = '',
                 superclass: Optional[JavaType] = None, interfaces=(), field_names=(),
                 imports=(), **kwargs):
        super().__init__(name, line, **kwargs)
        self.type_kind = type_kind
        self.package = package
        self.superclass = superclass
        self.interfaces = tuple(interfaces)
        self.field_names = tuple(field_names)
        self.imports = tuple(imports)

    @property
    def is_interface(self) -> bool:
        return self.type_kind in ('interface', 'annotation')

    @property
    def is_abstract(self) -> bool:
        return 'abstract' in self.modifiers

    @property
    def qualified_name(self) -> str:
        if self.declaring_type is not None:
            return f"{self.declaring_type.qualified_name}.{self.name}"
        if self.package:
            return f"{self.package}.{self.name}"
        return self.name

    @property
    def binary_name(self) -> str:
        """Qualified name with '$' between nested types, as class loaders expect."""
        if self.declaring_type is not None:
            return f"{self.declaring_type.binary_name}${self.name}"
        return self.qualified_name


class FieldDeclaration(Declaration):
    kind = FIELD_KIND

    def __init__(self, name: str, line: int, java_type: Optional[JavaType] = None,
                 initializer: Optional[str] = None, **kwargs):
        super().__init__(name, line, **kwargs)
        self.type = java_type
        self.initializer = initializer


class MethodDeclaration(Declaration):
    kind = METHOD_KIND

    def __init__(self, name: str, line: int, parameters=(), type_parameters=(),
                 return_type: Optional[JavaType] = None, exceptions=(),
                 is_constructor: bool = False, **kwargs):
        super().__init__(name, line, **kwargs)
        self.parameters = tuple(parameters)
        self.type_parameters = tuple(type_parameters)
        self.return_type = return_type
        self.exceptions = tuple(exceptions)
        self.is_constructor = is_constructor

    @property
    def returns_value(self) -> bool:
        return not self.is_constructor and self.return_type is not None and not self.return_type.is_void

    @property
    def call_signature(self) -> str:
        types = ', '.join(str(parameter.type) for parameter in self.parameters)
        return f"{self.name}({types})"

    @property
    def qualified_name(self) -> str:
        if self.declaring_type is None:
            return self.call_signature
        return f"{self.declaring_type.qualified_name}#{self.call_signature}"


class ReconciledTagSet:
    """
    Existing tags of one declaration, split by kind and keyed by identity.

    ``entries`` keeps every accepted tag in source order as (kind, key, text);
    the maps give direct access by parameter name or exception name.
    """

    def __init__(self):
        self.params: Dict[str, str] = {}
        self.return_text: Optional[str] = None
        self.throws: Dict[str, str] = {}
        self.unknowns: List[Tuple[str, str]] = []
        self.names: List[str] = []
        self.entries: List[Tuple[str, str, str]] = []

    def add_param(self, key: str, text: str):
        if key in self.params:
            raise DuplicateTagError(f"Duplicate @param tag for '{key}'", tag=PARAM_TAG)
        self.params[key] = text
        self.entries.append((PARAM_TAG, key, text))

    def set_return(self, text: str):
        if self.return_text is not None:
            raise DuplicateTagError("Duplicate @return tag", tag=RETURN_TAG)
        self.return_text = text
        self.entries.append((RETURN_TAG, RETURN_TAG, text))

    def add_throws(self, key: str, text: str):
        if key in self.throws:
            raise DuplicateTagError(f"Duplicate @throws tag for '{key}'", tag=THROWS_TAG)
        self.throws[key] = text
        self.entries.append((THROWS_TAG, key, text))

    def add_unknown(self, name: str, text: str):
        self.unknowns.append((name, text))
        self.entries.append((UNKNOWN_TAG, name, text))

    def add_name(self, name: str):
        if name not in self.names:
            self.names.append(name)

    def has_name(self, name: str) -> bool:
        return name in self.names

    def __repr__(self):
        return (f"ReconciledTagSet(names={self.names}, params={list(self.params)}, "
                f"return={self.return_text is not None}, throws={list(self.throws)}, "
                f"unknowns={[name for name, _ in self.unknowns]})")
