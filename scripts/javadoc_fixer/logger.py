#!/usr/bin/env python3
"""
Logging for the Javadoc fixer.

Messages go to the console, or become GitHub Actions workflow commands when
running inside a workflow, so that reconciliation warnings show up as
annotations on the offending Java line:

- ::warning file=Foo.java,line=12:: - yellow annotation
- ::error file=Foo.java:: - red annotation
- ::group:: / ::endgroup:: - collapsible section per processed file

Usage:
    from logger import get_logger

    logger = get_logger(__name__)
    logger.warning("Fixed unknown param 'x'", file="Foo.java", line=12)
"""

import sys
import os
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels for structured logging."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class Logger:
    """
    Console logger that switches to workflow commands under GitHub Actions.

    Warnings and errors are counted so that callers can report how noisy a
    run was.
    """

    def __init__(self, name: str, level: LogLevel = LogLevel.INFO):
        """
        Initialize logger.

        Args:
            name: Logger name (typically module name)
            level: Minimum log level to display
        """
        self.name = name
        self.level = level
        self.is_github_actions = os.environ.get('GITHUB_ACTIONS') == 'true'
        self.warning_count = 0
        self.error_count = 0
        self._group_stack = []

    def _should_log(self, level: LogLevel) -> bool:
        return level.value >= self.level.value

    def _annotation(self, command: str, message: str, file: Optional[str], line: Optional[int]) -> str:
        """Build a workflow command such as ::warning file=A.java,line=3::msg."""
        properties = []
        if file:
            properties.append(f"file={file}")
            if line:
                properties.append(f"line={line}")
        if properties:
            return f"::{command} {','.join(properties)}::{message}"
        return f"::{command}::{message}"

    def _location(self, message: str, file: Optional[str], line: Optional[int]) -> str:
        if file and line:
            return f"{file}:{line}: {message}"
        if file:
            return f"{file}: {message}"
        return message

    def debug(self, message: str):
        """Log debug message (only in DEBUG mode)."""
        if self._should_log(LogLevel.DEBUG):
            print(f"[DEBUG] {message}", file=sys.stdout)

    def info(self, message: str):
        """Log informational message."""
        if self._should_log(LogLevel.INFO):
            print(message, file=sys.stdout)

    def success(self, message: str):
        """Log success message (info level with checkmark)."""
        if self._should_log(LogLevel.INFO):
            print(f"✅ {message}", file=sys.stdout)

    def warning(self, message: str, file: Optional[str] = None, line: Optional[int] = None):
        """
        Log warning message.

        Args:
            message: Warning message
            file: Optional Java file the warning refers to
            line: Optional line of the declaration in that file
        """
        self.warning_count += 1
        if not self._should_log(LogLevel.WARNING):
            return
        if self.is_github_actions:
            print(self._annotation("warning", message, file, line), file=sys.stdout)
        else:
            print(f"⚠️  {self._location(message, file, line)}", file=sys.stderr)

    def error(self, message: str, file: Optional[str] = None, line: Optional[int] = None):
        """
        Log error message.

        Args:
            message: Error message
            file: Optional Java file the error refers to
            line: Optional line in that file
        """
        self.error_count += 1
        if not self._should_log(LogLevel.ERROR):
            return
        if self.is_github_actions:
            print(self._annotation("error", message, file, line), file=sys.stdout)
        else:
            print(f"❌ {self._location(message, file, line)}", file=sys.stderr)

    def notice(self, message: str, file: Optional[str] = None, line: Optional[int] = None):
        """Log notice message (a blue annotation under GitHub Actions, info otherwise)."""
        if not self._should_log(LogLevel.INFO):
            return
        if self.is_github_actions:
            print(self._annotation("notice", message, file, line), file=sys.stdout)
        else:
            print(f"ℹ️  {self._location(message, file, line)}", file=sys.stdout)

    def group(self, title: str):
        """
        Start a collapsible group in GitHub Actions logs.

        Args:
            title: Group title, usually the file being processed
        """
        self._group_stack.append(title)
        if self.is_github_actions:
            print(f"::group::{title}", file=sys.stdout)
        elif self._should_log(LogLevel.INFO):
            print(f"\n{'=' * 60}", file=sys.stdout)
            print(title, file=sys.stdout)
            print('=' * 60, file=sys.stdout)

    def endgroup(self):
        """End the current collapsible group."""
        if self._group_stack:
            self._group_stack.pop()
            if self.is_github_actions:
                print("::endgroup::", file=sys.stdout)

    def separator(self, char: str = "=", length: int = 60):
        """Print a separator line."""
        if self._should_log(LogLevel.INFO):
            print(char * length, file=sys.stdout)

    def set_level(self, level: LogLevel):
        """Change the minimum log level."""
        self.level = level

    def reset_counts(self):
        self.warning_count = 0
        self.error_count = 0


# Global logger instance
_default_logger: Optional[Logger] = None


def get_logger(name: str = "javadoc-fix", level: Optional[LogLevel] = None) -> Logger:
    """
    Get or create the shared logger instance.

    Args:
        name: Logger name (typically module name)
        level: Optional log level (defaults to INFO, or DEBUG if JAVADOC_FIX_DEBUG is set)

    Returns:
        Logger instance
    """
    global _default_logger

    if _default_logger is None:
        if level is None:
            if os.environ.get('JAVADOC_FIX_DEBUG') == 'true':
                level = LogLevel.DEBUG
            else:
                level = LogLevel.INFO

        _default_logger = Logger(name, level)

    return _default_logger


def configure_logging(level: LogLevel):
    """
    Configure global logging level.

    Args:
        level: Log level to set
    """
    get_logger().set_level(level)
