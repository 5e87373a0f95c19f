#!/usr/bin/env python3
"""
Class lookup used to qualify type names and to classify thrown exceptions.

The index knows a table of common JDK classes, every type found in the
source roots handed to the fixer and, optionally, classes listed in a JSON
class index:

    {
        "com.example.Base": {
            "superclass": "java.lang.Object",
            "interfaces": ["java.io.Serializable"],
            "methods": [{"name": "run", "parameters": ["java.lang.String"]}],
            "interface": false
        }
    }

Anything else is unknown, and callers fall back to treating it as such.
"""

import json
from typing import Dict, Iterator, List, Optional

from constants import JAVA_LANG_PACKAGE, THROWABLE, RUNTIME_EXCEPTION
from logger import get_logger

logger = get_logger(__name__)

OBJECT = 'java.lang.Object'


class MethodInfo:
    def __init__(self, name: str, parameter_types=()):
        self.name = name
        self.parameter_types = tuple(parameter_types)

    @classmethod
    def from_signature(cls, signature: str) -> 'MethodInfo':
        """Build from 'name(type1, type2)'."""
        name, _, rest = signature.partition('(')
        params = [param.strip() for param in rest.rstrip(')').split(',') if param.strip()]
        return cls(name.strip(), params)

    def __repr__(self):
        return f"MethodInfo({self.name}({', '.join(self.parameter_types)}))"


class ClassInfo:
    """What the index knows about one class: its supertypes and declared methods."""

    def __init__(self, name: str, superclass: Optional[str] = None, interfaces=(), methods=(),
                 is_interface: bool = False):
        self.name = name
        self.is_interface = is_interface
        if superclass is None and not is_interface and name != OBJECT:
            superclass = OBJECT
        self.superclass = superclass
        self.interfaces = tuple(interfaces)
        self.methods = tuple(methods)

    def declared_methods(self, name: str) -> List[MethodInfo]:
        return [method for method in self.methods if method.name == name]

    def __repr__(self):
        return f"ClassInfo({self.name!r})"


# name: (superclass, interfaces, method signatures, is_interface)
_JDK_CLASSES = {
    'java.lang.Object': (None, (), ('toString()', 'equals(java.lang.Object)', 'hashCode()',
                                    'clone()', 'finalize()'), False),
    'java.lang.String': (None, ('java.lang.CharSequence', 'java.lang.Comparable', 'java.io.Serializable'), (), False),
    'java.lang.CharSequence': (None, (), ('length()', 'charAt(int)', 'subSequence(int, int)', 'toString()'), True),
    'java.lang.Comparable': (None, (), (), True),
    'java.lang.Iterable': (None, (), ('iterator()',), True),
    'java.lang.Runnable': (None, (), ('run()',), True),
    'java.lang.AutoCloseable': (None, (), ('close()',), True),
    'java.lang.Cloneable': (None, (), (), True),
    'java.lang.Number': (None, ('java.io.Serializable',), ('intValue()', 'longValue()', 'floatValue()',
                                                          'doubleValue()'), False),
    'java.lang.Integer': ('java.lang.Number', ('java.lang.Comparable',), (), False),
    'java.lang.Long': ('java.lang.Number', ('java.lang.Comparable',), (), False),
    'java.lang.Short': ('java.lang.Number', ('java.lang.Comparable',), (), False),
    'java.lang.Byte': ('java.lang.Number', ('java.lang.Comparable',), (), False),
    'java.lang.Double': ('java.lang.Number', ('java.lang.Comparable',), (), False),
    'java.lang.Float': ('java.lang.Number', ('java.lang.Comparable',), (), False),
    'java.lang.Boolean': (None, ('java.io.Serializable', 'java.lang.Comparable'), (), False),
    'java.lang.Character': (None, ('java.io.Serializable', 'java.lang.Comparable'), (), False),
    'java.lang.Void': (None, (), (), False),
    'java.lang.Class': (None, ('java.io.Serializable',), (), False),
    'java.lang.Enum': (None, ('java.lang.Comparable', 'java.io.Serializable'), (), False),
    'java.lang.Record': (None, (), (), False),
    'java.lang.Math': (None, (), (), False),
    'java.lang.System': (None, (), (), False),
    'java.lang.Thread': (None, ('java.lang.Runnable',), ('run()',), False),
    'java.lang.StringBuilder': (None, ('java.lang.CharSequence', 'java.io.Serializable'), (), False),
    'java.lang.StringBuffer': (None, ('java.lang.CharSequence', 'java.io.Serializable'), (), False),
    'java.lang.Throwable': (None, ('java.io.Serializable',), ('getMessage()', 'getLocalizedMessage()',
                                                             'getCause()', 'toString()'), False),
    'java.lang.Exception': ('java.lang.Throwable', (), (), False),
    'java.lang.Error': ('java.lang.Throwable', (), (), False),
    'java.lang.RuntimeException': ('java.lang.Exception', (), (), False),
    'java.lang.IllegalArgumentException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.IllegalStateException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.NullPointerException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.NumberFormatException': ('java.lang.IllegalArgumentException', (), (), False),
    'java.lang.IndexOutOfBoundsException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.ArrayIndexOutOfBoundsException': ('java.lang.IndexOutOfBoundsException', (), (), False),
    'java.lang.StringIndexOutOfBoundsException': ('java.lang.IndexOutOfBoundsException', (), (), False),
    'java.lang.UnsupportedOperationException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.ClassCastException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.ArithmeticException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.ArrayStoreException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.NegativeArraySizeException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.SecurityException': ('java.lang.RuntimeException', (), (), False),
    'java.lang.InterruptedException': ('java.lang.Exception', (), (), False),
    'java.lang.CloneNotSupportedException': ('java.lang.Exception', (), (), False),
    'java.lang.ReflectiveOperationException': ('java.lang.Exception', (), (), False),
    'java.lang.ClassNotFoundException': ('java.lang.ReflectiveOperationException', (), (), False),
    'java.lang.NoSuchMethodException': ('java.lang.ReflectiveOperationException', (), (), False),
    'java.lang.NoSuchFieldException': ('java.lang.ReflectiveOperationException', (), (), False),
    'java.lang.InstantiationException': ('java.lang.ReflectiveOperationException', (), (), False),
    'java.lang.IllegalAccessException': ('java.lang.ReflectiveOperationException', (), (), False),
    'java.lang.AssertionError': ('java.lang.Error', (), (), False),
    'java.lang.LinkageError': ('java.lang.Error', (), (), False),
    'java.lang.VirtualMachineError': ('java.lang.Error', (), (), False),
    'java.lang.OutOfMemoryError': ('java.lang.VirtualMachineError', (), (), False),
    'java.lang.StackOverflowError': ('java.lang.VirtualMachineError', (), (), False),
    'java.io.Serializable': (None, (), (), True),
    'java.io.Closeable': (None, ('java.lang.AutoCloseable',), ('close()',), True),
    'java.io.IOException': ('java.lang.Exception', (), (), False),
    'java.io.FileNotFoundException': ('java.io.IOException', (), (), False),
    'java.io.EOFException': ('java.io.IOException', (), (), False),
    'java.io.UncheckedIOException': ('java.lang.RuntimeException', (), (), False),
    'java.net.SocketException': ('java.io.IOException', (), (), False),
    'java.net.ConnectException': ('java.net.SocketException', (), (), False),
    'java.net.MalformedURLException': ('java.io.IOException', (), (), False),
    'java.net.UnknownHostException': ('java.io.IOException', (), (), False),
    'java.net.URISyntaxException': ('java.lang.Exception', (), (), False),
    'java.util.Collection': (None, ('java.lang.Iterable',), ('size()', 'isEmpty()'), True),
    'java.util.List': (None, ('java.util.Collection',), ('get(int)',), True),
    'java.util.Set': (None, ('java.util.Collection',), (), True),
    'java.util.Map': (None, (), ('size()', 'isEmpty()'), True),
    'java.util.Iterator': (None, (), ('hasNext()', 'next()', 'remove()'), True),
    'java.util.Optional': (None, (), (), False),
    'java.util.ArrayList': (None, ('java.util.List', 'java.io.Serializable'), (), False),
    'java.util.HashMap': (None, ('java.util.Map', 'java.io.Serializable'), (), False),
    'java.util.NoSuchElementException': ('java.lang.RuntimeException', (), (), False),
    'java.util.ConcurrentModificationException': ('java.lang.RuntimeException', (), (), False),
    'java.util.concurrent.Callable': (None, (), ('call()',), True),
    'java.util.concurrent.ExecutionException': ('java.lang.Exception', (), (), False),
    'java.util.concurrent.TimeoutException': ('java.lang.Exception', (), (), False),
}


def jdk_classes() -> Iterator[ClassInfo]:
    for name, (superclass, interfaces, methods, is_interface) in _JDK_CLASSES.items():
        yield ClassInfo(name, superclass, interfaces,
                        [MethodInfo.from_signature(signature) for signature in methods],
                        is_interface)


class ClassIndex:
    """
    Lookup of known classes by qualified name.

    A child index (see child()) sees its parent's classes, so the types of one
    file can be added without touching the run-wide index.
    """

    def __init__(self, parent: Optional['ClassIndex'] = None, include_jdk: bool = True):
        self.parent = parent
        self._classes: Dict[str, ClassInfo] = {}
        if parent is None and include_jdk:
            for info in jdk_classes():
                self.add(info)

    def add(self, info: ClassInfo):
        self._classes[info.name] = info

    def child(self) -> 'ClassIndex':
        return ClassIndex(parent=self)

    def own_classes(self) -> List[ClassInfo]:
        """Classes added to this index, without those of the parent."""
        return list(self._classes.values())

    def __contains__(self, name):
        return self.resolve_class(name) is not None

    def resolve_class(self, name: Optional[str]) -> Optional[ClassInfo]:
        """Look up a class by qualified name ('$' accepted for nested classes)."""
        if not name:
            return None
        name = name.replace('$', '.')
        info = self._classes.get(name)
        if info is None and self.parent is not None:
            return self.parent.resolve_class(name)
        return info

    def supertypes(self, info: ClassInfo) -> Iterator[ClassInfo]:
        """Every known superclass and interface of info, transitively, each once."""
        seen = {info.name}
        pending = [info]
        while pending:
            current = pending.pop(0)
            for name in (current.superclass,) + current.interfaces:
                if not name or name in seen:
                    continue
                seen.add(name)
                parent = self.resolve_class(name)
                if parent is not None:
                    yield parent
                    pending.append(parent)

    def is_assignable(self, info: Optional[ClassInfo], target: str) -> bool:
        """Whether info is target or extends/implements it."""
        if info is None:
            return False
        if info.name == target:
            return True
        return any(parent.name == target for parent in self.supertypes(info))

    def is_throwable(self, info: Optional[ClassInfo]) -> bool:
        return self.is_assignable(info, THROWABLE)

    def is_unchecked(self, info: Optional[ClassInfo]) -> bool:
        return self.is_assignable(info, RUNTIME_EXCEPTION)

    def qualify(self, name: str, package: str = '', imports=(), enclosing=()) -> Optional[str]:
        """Qualify a type name as written in source.

        Args:
            name: Simple or partly qualified name, without generics or brackets
            package: Package of the compilation unit
            imports: Import declarations ('a.b.C', 'a.b.*', 'static ...' entries are ignored)
            enclosing: Qualified names of the enclosing types, innermost first

        Returns:
            str: Qualified name, or None if the name cannot be resolved
        """
        if not name:
            return None
        head, dot, tail = name.partition('.')
        if dot:
            qualified_head = self.qualify(head, package, imports, enclosing)
            if qualified_head is not None:
                candidate = f"{qualified_head}.{tail}"
                if candidate in self:
                    return candidate
            return name if name in self else None

        for entry in imports:
            if entry.startswith('static '):
                continue
            if entry.endswith('.' + name):
                return entry
        for outer in enclosing:
            candidate = f"{outer}.{name}"
            if candidate in self:
                return candidate
            if outer.rsplit('.', 1)[-1] == name:
                return outer
        candidate = f"{package}.{name}" if package else name
        if candidate in self:
            return candidate
        for entry in imports:
            if entry.endswith('.*') and not entry.startswith('static '):
                candidate = f"{entry[:-2]}.{name}"
                if candidate in self:
                    return candidate
        candidate = f"{JAVA_LANG_PACKAGE}.{name}"
        if candidate in self:
            return candidate
        return None

    def load_json(self, path: str, encoding: str = 'utf-8') -> int:
        """Add the classes listed in a JSON class index file.

        Returns:
            int: Number of classes added
        """
        with open(path, 'r', encoding=encoding) as f:
            entries = json.load(f)

        for name, entry in entries.items():
            methods = []
            for method in entry.get('methods', []):
                if isinstance(method, str):
                    methods.append(MethodInfo.from_signature(method))
                else:
                    methods.append(MethodInfo(method['name'], method.get('parameters', [])))
            self.add(ClassInfo(name, entry.get('superclass'), entry.get('interfaces', []), methods,
                               entry.get('interface', False)))

        logger.debug(f"Loaded {len(entries)} classes from {path}")
        return len(entries)


def enclosing_names(type_declaration) -> List[str]:
    """Qualified names of a type and the types around it, innermost first."""
    names = []
    current = type_declaration
    while current is not None:
        names.append(current.qualified_name)
        current = current.declaring_type
    return names


def top_level_type(type_declaration):
    while type_declaration.declaring_type is not None:
        type_declaration = type_declaration.declaring_type
    return type_declaration


def qualify_in(index: ClassIndex, name: str, type_declaration) -> Optional[str]:
    """Qualify name as it would be resolved inside type_declaration."""
    if type_declaration is None:
        return index.qualify(name)
    outer = top_level_type(type_declaration)
    return index.qualify(name, outer.package, outer.imports, enclosing_names(type_declaration))


def resolve_in(index: ClassIndex, name: str, type_declaration) -> Optional[ClassInfo]:
    """Resolve name inside type_declaration, trying it as written first."""
    info = index.resolve_class(name)
    if info is not None:
        return info
    return index.resolve_class(qualify_in(index, name, type_declaration))
