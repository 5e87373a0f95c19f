#!/usr/bin/env python3
"""
Exceptions raised while fixing Javadoc comments.

Errors for a single tag are logged and the tag skipped; errors for a
declaration or a whole file abort that file only.
"""


class JavadocFixError(Exception):
    """Base class for all fixer errors."""


class ConfigurationError(JavadocFixError):
    """Raised when a configuration value cannot be used at all."""


class SourceParseError(JavadocFixError):
    """Raised when a Java source file cannot be parsed."""

    def __init__(self, message, file=None, line=None):
        super().__init__(message)
        self.file = file
        self.line = line


class ReconciliationError(JavadocFixError):
    """Raised when a declaration's comment cannot be regenerated."""

    def __init__(self, message, declaration=None, tag=None):
        super().__init__(message)
        self.declaration = declaration
        self.tag = tag

    def __str__(self):
        message = super().__str__()
        if self.declaration is not None:
            message = f"{message} (in {self.declaration})"
        if self.tag is not None:
            message = f"{message} [@{self.tag}]"
        return message


class DuplicateTagError(ReconciliationError):
    """Raised when a param or throws key is inserted twice into a tag set."""


class FileWriteError(JavadocFixError):
    """Raised when a fixed Java file cannot be written back."""

    def __init__(self, message, file=None):
        super().__init__(message)
        self.file = file
