#!/usr/bin/env python3
"""
Run configuration for the Javadoc fixer.

Values come from JAVADOC_FIX_* environment variables and may be overridden
from the command line. A FixConfig is read-only once built.
"""

import getpass
import os
from typing import FrozenSet, Iterable, Optional

from constants import (
    DEFAULT_LEVEL,
    DEFAULT_SINCE_VALUE,
    DEFAULT_VERSION_VALUE,
    ENV_PREFIX,
    FIX_TAGS_ALL,
    FIXABLE_TAGS,
    LEVEL_PACKAGE,
    LEVEL_PRIVATE,
    LEVEL_PROTECTED,
    LEVEL_PUBLIC,
    LEVELS,
    SNAPSHOT_SUFFIX,
)
from logger import get_logger

logger = get_logger(__name__)

_FIELDS = (
    'fix_tags',
    'level',
    'default_author',
    'default_version',
    'default_since',
    'fix_class_comment',
    'fix_field_comment',
    'fix_method_comment',
    'remove_unknown_throws',
    'ignore_api_diff',
    'strict_inherited_signature',
)


def parse_fix_tags(value) -> FrozenSet[str]:
    """Parse the fix-tags setting ("all" or a comma separated list of tag kinds).

    Unknown entries are reported and ignored.
    """
    if value is None:
        return frozenset(FIXABLE_TAGS)
    if isinstance(value, str):
        entries = value.split(',')
    else:
        entries = list(value)

    tags = set()
    for entry in entries:
        tag = entry.strip()
        if not tag:
            continue
        if tag == FIX_TAGS_ALL:
            return frozenset(FIXABLE_TAGS)
        if tag in FIXABLE_TAGS:
            tags.add(tag)
        else:
            logger.warning(f"Unrecognized '{tag}' for fix-tags parameter. Ignored it!")
    return frozenset(tags)


def validate_level(level: Optional[str]) -> str:
    """Return level if it is a known visibility level, otherwise the default."""
    if level is None:
        return DEFAULT_LEVEL
    normalized = level.strip().lower()
    if normalized not in LEVELS:
        logger.warning(f"Unrecognized '{level}' for level parameter, using '{DEFAULT_LEVEL}' level.")
        return DEFAULT_LEVEL
    return normalized


def strip_snapshot(version: str) -> str:
    if version.endswith(SNAPSHOT_SUFFIX):
        return version[:-len(SNAPSHOT_SUFFIX)]
    return version


def current_user() -> str:
    """Name of the user running the fixer, used as the default author."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.environ.get('USER', 'unknown')


class FixConfig:
    """Immutable settings for one fixer run."""

    __slots__ = _FIELDS

    def __init__(self,
                 fix_tags=None,
                 level: Optional[str] = DEFAULT_LEVEL,
                 default_author: Optional[str] = None,
                 default_version: str = DEFAULT_VERSION_VALUE,
                 default_since: str = DEFAULT_SINCE_VALUE,
                 fix_class_comment: bool = True,
                 fix_field_comment: bool = True,
                 fix_method_comment: bool = True,
                 remove_unknown_throws: bool = False,
                 ignore_api_diff: bool = False,
                 strict_inherited_signature: bool = True):
        values = {
            'fix_tags': fix_tags if isinstance(fix_tags, frozenset) else parse_fix_tags(fix_tags),
            'level': validate_level(level),
            'default_author': default_author if default_author else current_user(),
            'default_version': default_version,
            'default_since': strip_snapshot(default_since),
            'fix_class_comment': fix_class_comment,
            'fix_field_comment': fix_field_comment,
            'fix_method_comment': fix_method_comment,
            'remove_unknown_throws': remove_unknown_throws,
            'ignore_api_diff': ignore_api_diff,
            'strict_inherited_signature': strict_inherited_signature,
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"FixConfig is read-only, cannot set '{name}'")

    def __repr__(self):
        settings = ', '.join(f"{name}={getattr(self, name)!r}" for name in _FIELDS)
        return f"FixConfig({settings})"

    def __eq__(self, other):
        if not isinstance(other, FixConfig):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in _FIELDS)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in _FIELDS))

    def fix_tag(self, tag: str) -> bool:
        """Whether the given tag kind should be fixed."""
        return tag in self.fix_tags

    def is_in_level(self, modifiers: Iterable[str]) -> bool:
        """Whether a declaration with these modifiers is visible at the configured level."""
        modifiers = set(modifiers)
        if self.level == LEVEL_PUBLIC:
            return 'public' in modifiers
        if self.level == LEVEL_PROTECTED:
            return 'public' in modifiers or 'protected' in modifiers
        if self.level == LEVEL_PACKAGE:
            return 'private' not in modifiers
        return self.level == LEVEL_PRIVATE

    def replace(self, **changes) -> 'FixConfig':
        """Return a copy with some settings changed."""
        values = {name: getattr(self, name) for name in _FIELDS}
        unknown = set(changes) - set(_FIELDS)
        if unknown:
            raise TypeError(f"Unknown FixConfig settings: {', '.join(sorted(unknown))}")
        values.update(changes)
        return FixConfig(**values)

    @classmethod
    def from_env(cls, environ=None) -> 'FixConfig':
        """Build a configuration from JAVADOC_FIX_* environment variables."""
        environ = os.environ if environ is None else environ

        return cls(
            fix_tags=environ.get(ENV_PREFIX + 'TAGS'),
            level=environ.get(ENV_PREFIX + 'LEVEL', DEFAULT_LEVEL),
            default_author=environ.get(ENV_PREFIX + 'AUTHOR'),
            default_version=environ.get(ENV_PREFIX + 'VERSION', DEFAULT_VERSION_VALUE),
            default_since=environ.get(ENV_PREFIX + 'SINCE', DEFAULT_SINCE_VALUE),
            fix_class_comment=_env_flag(environ, 'FIX_CLASS_COMMENT', True),
            fix_field_comment=_env_flag(environ, 'FIX_FIELD_COMMENT', True),
            fix_method_comment=_env_flag(environ, 'FIX_METHOD_COMMENT', True),
            remove_unknown_throws=_env_flag(environ, 'REMOVE_UNKNOWN_THROWS', False),
            ignore_api_diff=_env_flag(environ, 'IGNORE_API_DIFF', False),
            strict_inherited_signature=not _env_flag(environ, 'LEGACY_INHERITED_MATCH', False),
        )

    @classmethod
    def from_args(cls, args, environ=None) -> 'FixConfig':
        """Build a configuration from the environment, overridden by parsed CLI arguments.

        Args:
            args: argparse namespace from standalone.build_arg_parser()
            environ: Optional environment mapping (defaults to os.environ)

        Returns:
            FixConfig
        """
        config = cls.from_env(environ)
        changes = {}

        if getattr(args, 'fix_tags', None) is not None:
            changes['fix_tags'] = parse_fix_tags(args.fix_tags)
        for name in ('level', 'default_author', 'default_version', 'default_since'):
            value = getattr(args, name, None)
            if value is not None:
                changes[name] = value
        if getattr(args, 'no_fix_class_comment', False):
            changes['fix_class_comment'] = False
        if getattr(args, 'no_fix_field_comment', False):
            changes['fix_field_comment'] = False
        if getattr(args, 'no_fix_method_comment', False):
            changes['fix_method_comment'] = False
        if getattr(args, 'remove_unknown_throws', False):
            changes['remove_unknown_throws'] = True
        if getattr(args, 'ignore_api_diff', False):
            changes['ignore_api_diff'] = True
        if getattr(args, 'legacy_inherited_match', False):
            changes['strict_inherited_signature'] = False

        return config.replace(**changes) if changes else config


def _env_flag(environ, name: str, default: bool) -> bool:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes')
