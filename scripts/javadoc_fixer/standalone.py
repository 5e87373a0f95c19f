#!/usr/bin/env python3
"""
Command line entry point: fix the Javadoc comments of Java files and directories.

Usage:
    python standalone.py src/main/java --source-root src/main/java --dry-run
"""

import argparse
import sys

from api_diff import ApiDiff
from constants import FIX_TAGS_ALL, FIXABLE_TAGS, LEVELS
from errors import ConfigurationError, FileWriteError, ReconciliationError, SourceParseError
from fix_config import FixConfig
from java_parser import find_java_files, index_source_roots
from javadoc_common import fix_java_file
from logger import LogLevel, configure_logging, get_logger
from type_resolver import ClassIndex

logger = get_logger(__name__)


def build_arg_parser():
    parser = argparse.ArgumentParser(description='Fix missing and incomplete Javadoc comments in Java files')
    parser.add_argument('paths', nargs='+', help='Java files or directories to fix')
    parser.add_argument('--dry-run', action='store_true', help='Report files that would change without writing them')
    parser.add_argument('--encoding', default='utf-8', help='Encoding of the Java sources (default: utf-8)')
    parser.add_argument('--source-root', action='append', default=[],
                        help='Source directory scanned to resolve project types (repeatable)')
    parser.add_argument('--class-index', help='JSON file describing classes outside the sources')
    parser.add_argument('--api-diff-report', help='Clirr text report used to decide where @since is added')
    parser.add_argument('--fix-tags', help=f"Comma separated tags to fix: {','.join(FIXABLE_TAGS)} or '{FIX_TAGS_ALL}'")
    parser.add_argument('--level', help=f"Lowest visibility to fix: {', '.join(LEVELS)} (default: protected)")
    parser.add_argument('--default-author', help='Value of added @author tags (default: current user)')
    parser.add_argument('--default-version', help='Value of added @version tags')
    parser.add_argument('--default-since', help='Value of added @since tags')
    parser.add_argument('--no-fix-class-comment', action='store_true', help='Leave class comments alone')
    parser.add_argument('--no-fix-field-comment', action='store_true', help='Leave field comments alone')
    parser.add_argument('--no-fix-method-comment', action='store_true', help='Leave method comments alone')
    parser.add_argument('--remove-unknown-throws', action='store_true',
                        help='Drop @throws tags naming classes that cannot be resolved')
    parser.add_argument('--ignore-api-diff', action='store_true', help='Do not use the API diff report')
    parser.add_argument('--legacy-inherited-match', action='store_true',
                        help='Detect overridden methods by their last parameter only')
    parser.add_argument('--debug', action='store_true', help='Show debug output')
    return parser


def build_class_index(args):
    """Build the ClassIndex for a run from the JDK table, the source roots and the class index file."""
    class_index = ClassIndex()
    if args.class_index:
        try:
            class_index.load_json(args.class_index, args.encoding)
        except (OSError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Could not load class index {args.class_index}: {e}") from e
    if args.source_root:
        index_source_roots(args.source_root, class_index, args.encoding)
    return class_index


def collect_java_files(paths):
    java_files = []
    for path in paths:
        found = find_java_files(path)
        if not found:
            logger.warning(f"No Java files found in {path}")
        java_files.extend(found)
    return java_files


def process_files(java_files, config, api_diff, class_index, encoding='utf-8', dry_run=False):
    """Fix every file, logging per-file failures.

    Returns:
        tuple: (modified files, failed files)
    """
    files_modified = []
    files_failed = []

    for java_file in java_files:
        logger.group(f"Processing: {java_file}")
        try:
            if fix_java_file(java_file, config, api_diff, class_index, encoding, dry_run):
                files_modified.append(java_file)
                if dry_run:
                    logger.info(f"Would update {java_file}")
                else:
                    logger.success(f"Updated {java_file}")
            else:
                logger.info(f"No changes needed in {java_file}")
        except SourceParseError as e:
            logger.error(f"Could not parse: {e}", file=e.file or java_file, line=e.line)
            files_failed.append(java_file)
        except ReconciliationError as e:
            logger.error(f"Could not fix comments: {e}", file=java_file)
            files_failed.append(java_file)
        except FileWriteError as e:
            logger.error(str(e), file=e.file or java_file)
            files_failed.append(java_file)
        finally:
            logger.endgroup()

    return files_modified, files_failed


def print_final_summary(java_files, files_modified, files_failed, dry_run=False):
    logger.separator()
    logger.info("SUMMARY")
    logger.separator()
    logger.info(f"Files processed: {len(java_files)}")
    logger.info(f"Files {'to modify' if dry_run else 'modified'}: {len(files_modified)}")
    logger.info(f"Warnings: {logger.warning_count}")
    if files_failed:
        logger.info(f"Files failed: {len(files_failed)}")
        for java_file in files_failed:
            logger.info(f"  - {java_file}")


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logger.reset_counts()
    if args.debug:
        configure_logging(LogLevel.DEBUG)

    try:
        config = FixConfig.from_args(args)
        class_index = build_class_index(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    api_diff = ApiDiff.disabled() if config.ignore_api_diff else ApiDiff.from_report(args.api_diff_report,
                                                                                     args.encoding)

    java_files = collect_java_files(args.paths)
    if not java_files:
        logger.info("No Java files to process.")
        return 0

    files_modified, files_failed = process_files(java_files, config, api_diff, class_index, args.encoding,
                                                 args.dry_run)
    print_final_summary(java_files, files_modified, files_failed, args.dry_run)

    if len(files_failed) == len(java_files):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
