#!/usr/bin/env python3
"""
Constants for Javadoc fixing.
Shared across all modules.
"""

# Comment tokens
START_JAVADOC = "/**"
END_JAVADOC = "*/"
SEPARATOR_JAVADOC = " * "
INHERITED_TAG = "{@inheritDoc}"
INHERITED_JAVADOC = START_JAVADOC + " " + INHERITED_TAG + " " + END_JAVADOC

# Tag kinds that can be fixed
AUTHOR_TAG = "author"
VERSION_TAG = "version"
SINCE_TAG = "since"
PARAM_TAG = "param"
RETURN_TAG = "return"
THROWS_TAG = "throws"
LINK_TAG = "link"
FIX_TAGS_ALL = "all"
FIXABLE_TAGS = (AUTHOR_TAG, VERSION_TAG, SINCE_TAG, PARAM_TAG, RETURN_TAG, THROWS_TAG, LINK_TAG)

# Alias accepted for throws tags
EXCEPTION_TAG = "exception"

# Visibility levels, most restrictive first
LEVEL_PUBLIC = "public"
LEVEL_PROTECTED = "protected"
LEVEL_PACKAGE = "package"
LEVEL_PRIVATE = "private"
LEVELS = (LEVEL_PUBLIC, LEVEL_PROTECTED, LEVEL_PACKAGE, LEVEL_PRIVATE)
DEFAULT_LEVEL = LEVEL_PROTECTED

# Default tag values
DEFAULT_VERSION_VALUE = "$Id: $"
DEFAULT_SINCE_VALUE = "1.0"
SNAPSHOT_SUFFIX = "-SNAPSHOT"

# Field constant comments
MAX_CONSTANT_VALUE_LENGTH = 40
TRUNCATED_MARKER = "{trunked}"

# Java language
PRIMITIVE_TYPES = ("byte", "short", "int", "long", "float", "double", "boolean", "char")
VOID_TYPE = "void"
JAVA_LANG_PACKAGE = "java.lang"
RUNTIME_EXCEPTION = "java.lang.RuntimeException"
THROWABLE = "java.lang.Throwable"
OVERRIDE_ANNOTATIONS = ("Override", "java.lang.Override")

# Environment variables
ENV_PREFIX = "JAVADOC_FIX_"
