#!/usr/bin/env python3
"""
GitHub Action entry point: fix the Javadoc of the Java files changed in a pull
request and commit the result.

Settings come from JAVADOC_FIX_* environment variables (see fix_config.py),
plus:

- JAVADOC_FIX_SOURCE_ROOTS: comma separated source directories to index
- JAVADOC_FIX_CLASS_INDEX: JSON class index file
- JAVADOC_FIX_API_DIFF_REPORT: Clirr text report
- JAVADOC_FIX_ENCODING: source encoding (default utf-8)
"""

import os
import subprocess
import sys

from api_diff import ApiDiff
from constants import ENV_PREFIX
from errors import ConfigurationError
from fix_config import FixConfig
from java_parser import index_source_roots
from logger import get_logger
from standalone import print_final_summary, process_files
from type_resolver import ClassIndex

logger = get_logger(__name__)


def get_changed_java_files():
    """Get list of Java files changed in the current PR."""
    try:
        # Get the base branch (usually main or master)
        base_ref = os.environ.get('GITHUB_BASE_REF', 'main')

        result = subprocess.run(
            ['git', 'diff', '--name-only', f'origin/{base_ref}...HEAD'],
            capture_output=True,
            text=True,
            check=True
        )

        changed_files = result.stdout.strip().split('\n')
        java_files = [f for f in changed_files if f.endswith('.java') and os.path.exists(f)]

        logger.info(f"Found {len(java_files)} changed Java files:")
        for f in java_files:
            logger.info(f"  - {f}")

        return java_files

    except subprocess.CalledProcessError as e:
        logger.error(f"Error getting changed files: {e}")
        return []


def commit_changes(files_modified):
    """Commit the fixed Java files."""
    if not files_modified:
        logger.info("No files were modified.")
        return

    try:
        for file_path in files_modified:
            subprocess.run(['git', 'add', file_path], check=True)

        commit_msg_parts = [
            f"Fix Javadoc comments in {len(files_modified)} file(s)",
            "",
            "Files modified:"
        ]
        for file_path in files_modified:
            commit_msg_parts.append(f"- {file_path}")

        subprocess.run(['git', 'commit', '-m', '\n'.join(commit_msg_parts)], check=True)
        logger.success(f"Committed changes for {len(files_modified)} files")

    except subprocess.CalledProcessError as e:
        logger.error(f"Error committing changes: {e}")


def setup_environment(single_file=None, environ=None):
    """Read the run settings from the environment.

    Returns:
        dict: java_files, commit_after, config, class_index, api_diff and encoding
    """
    environ = os.environ if environ is None else environ
    if single_file:
        if not os.path.exists(single_file):
            raise ConfigurationError(f"File {single_file} does not exist")
        java_files = [single_file]
        commit_after = False
    else:
        java_files = get_changed_java_files()
        commit_after = True

    encoding = environ.get(ENV_PREFIX + 'ENCODING', 'utf-8')
    config = FixConfig.from_env(environ)

    class_index = ClassIndex()
    class_index_file = environ.get(ENV_PREFIX + 'CLASS_INDEX')
    if class_index_file:
        try:
            class_index.load_json(class_index_file, encoding)
        except (OSError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Could not load class index {class_index_file}: {e}") from e
    source_roots = [root.strip() for root in environ.get(ENV_PREFIX + 'SOURCE_ROOTS', '').split(',') if root.strip()]
    if source_roots:
        index_source_roots(source_roots, class_index, encoding)

    if config.ignore_api_diff:
        api_diff = ApiDiff.disabled()
    else:
        api_diff = ApiDiff.from_report(environ.get(ENV_PREFIX + 'API_DIFF_REPORT'), encoding)

    return {
        'java_files': java_files,
        'commit_after': commit_after,
        'config': config,
        'class_index': class_index,
        'api_diff': api_diff,
        'encoding': encoding,
    }


def main(single_file=None):
    """Main entry point.

    Args:
        single_file: Path to a single Java file to process (for debug mode).
                    If None, runs in GitHub Action mode.
    """
    try:
        settings = setup_environment(single_file)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    if not settings['java_files']:
        logger.info("No Java files found in PR changes.")
        return

    files_modified, files_failed = process_files(settings['java_files'], settings['config'], settings['api_diff'],
                                                 settings['class_index'], settings['encoding'])
    print_final_summary(settings['java_files'], files_modified, files_failed)

    if files_modified:
        logger.notice(f"Fixed Javadoc in {len(files_modified)} of {len(settings['java_files'])} file(s)")

    if settings['commit_after']:
        commit_changes(files_modified)
    elif files_modified:
        logger.info(f"Modified {len(files_modified)} file(s) in debug mode (no commit)")

    if files_failed and len(files_failed) == len(settings['java_files']):
        sys.exit(1)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Fix Javadoc for the Java files of a pull request')
    parser.add_argument('file', nargs='?', help='Single Java file to process (debug mode)')

    args = parser.parse_args()
    main(single_file=args.file)
