#!/usr/bin/env python3
"""
API difference report: which classes and methods are new since the baseline.

The report is the plain text output of Clirr, one finding per line:

    INFO: 7011: com.example.Foo: Method 'public void bar(java.lang.String)' has been added
    INFO: 8000: com.example.Baz: Class com.example.Baz added

Code 7011 (method added) and 7012 (method added to interface) name a new
method; code 8000 names a new class. Other lines are ignored.
"""

from typing import Dict, Iterable, List, Optional

from logger import get_logger

logger = get_logger(__name__)

METHOD_ADDED_CODES = (7011, 7012)
CLASS_ADDED_CODE = 8000


def parse_clirr_report(lines: Iterable[str]):
    """Parse Clirr text output.

    Args:
        lines: Report lines

    Returns:
        tuple: (set of new class names, dict of class name to new method signatures)
    """
    new_types = set()
    new_methods: Dict[str, List[str]] = {}

    for line in lines:
        line = line.strip()
        if not line:
            continue
        split = [part for part in line.split(':') if part]
        if len(split) != 4:
            logger.debug(f"Skipping unparseable API diff line: {line}")
            continue
        try:
            code = int(split[1].strip())
        except ValueError:
            logger.debug(f"Skipping API diff line without a numeric code: {line}")
            continue

        class_name = split[2].strip()
        if code in METHOD_ADDED_CODES:
            quoted = split[3].split("'")
            if len(quoted) != 3:
                logger.debug(f"Skipping API diff line without a quoted method: {line}")
                continue
            new_methods.setdefault(class_name, []).append(quoted[1].strip())
        elif code == CLASS_ADDED_CODE:
            new_types.add(class_name)

    return new_types, new_methods


class ApiDiff:
    """
    Read-only answers to "is this class/method new since the baseline?".

    A disabled instance stands for a run without a report; callers then
    stamp @since without asking.
    """

    def __init__(self, new_types=(), new_methods: Optional[Dict[str, List[str]]] = None, enabled: bool = True):
        self.enabled = enabled
        self.new_types = frozenset(new_types)
        self.new_methods = {name: tuple(methods) for name, methods in (new_methods or {}).items()}

    @classmethod
    def disabled(cls) -> 'ApiDiff':
        return cls(enabled=False)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> 'ApiDiff':
        new_types, new_methods = parse_clirr_report(lines)
        return cls(new_types, new_methods)

    @classmethod
    def from_report(cls, path: Optional[str], encoding: str = 'utf-8') -> 'ApiDiff':
        """Load a Clirr text report, or a disabled diff when it is missing or unreadable."""
        if not path:
            return cls.disabled()
        try:
            with open(path, 'r', encoding=encoding) as f:
                diff = cls.from_lines(f)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read API diff report {path}: {e}. Stamping @since on every declaration.")
            return cls.disabled()

        logger.info(f"API diff: {len(diff.new_types)} new classes, "
                    f"{sum(len(methods) for methods in diff.new_methods.values())} new methods")
        return diff

    def is_new_type(self, qualified_name: str) -> bool:
        if not self.enabled:
            return True
        return qualified_name in self.new_types

    def is_new_method(self, type_name: str, method) -> bool:
        """Whether method of type_name is reported as added.

        A reported signature matches when it mentions the return type, the
        method name and the exact parameter type list.
        """
        if not self.enabled:
            return True
        signatures = self.new_methods.get(type_name)
        if not signatures:
            return False

        returns = str(method.return_type) if method.return_type is not None and not method.is_constructor else ''
        params = ', '.join(str(parameter.type) for parameter in method.parameters)
        for signature in signatures:
            if (returns + ' ') in signature and (method.name + '(') in signature \
                    and ('(' + params + ')') in signature:
                return True
        return False

    def __repr__(self):
        if not self.enabled:
            return "ApiDiff(disabled)"
        return f"ApiDiff(types={len(self.new_types)}, classes_with_methods={len(self.new_methods)})"
