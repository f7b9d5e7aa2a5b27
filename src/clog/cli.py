# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Command-line front end: read a changelog file, parse it, show it.

Exit codes:
    0  The changelog parsed successfully.
    1  The file could not be read, or the changelog did not parse.

Usage::

    clog CHANGELOG.md              # tree of versions, categories, items
    clog CHANGELOG.md --summary    # one table row per version
    python -m clog CHANGELOG.md
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from clog._types import Changelog, VersionEntry
from clog.errors import ParseError
from clog.logging import configure_logging, get_logger, json_log_default
from clog.parser import parse_changelog

logger = get_logger(__name__)

# Longest preamble excerpt shown in the tree view.
_PREAMBLE_PREVIEW = 60


def _preview(text: str) -> str:
    first = text.strip().split('\n', 1)[0].strip()
    if len(first) > _PREAMBLE_PREVIEW:
        return first[: _PREAMBLE_PREVIEW - 1] + '…'
    return first


def _version_label(entry: VersionEntry) -> Text:
    label = Text(entry.version, style='bold')
    if entry.date is not None:
        label.append(f'  {entry.date.isoformat()}', style='cyan')
    if entry.yanked:
        label.append('  [YANKED]', style='bold red')
    return label


def changelog_tree(changelog: Changelog) -> Tree:
    """Build a Rich tree of the whole changelog."""
    tree = Tree(Text('Changelog', style='bold'))
    if changelog.preamble.strip():
        tree.add(Text(f'preamble: {_preview(changelog.preamble)}', style='dim'))

    for entry in changelog.versions:
        branch = tree.add(_version_label(entry))
        if entry.preamble is not None:
            branch.add(Text(_preview(entry.preamble), style='dim italic'))
        for change_type, items in entry.changes.items():
            category = branch.add(Text(change_type.value, style='green'))
            for item in items:
                category.add(Text(item))

    if changelog.links:
        links = tree.add(Text('links', style='bold'))
        for label, url in changelog.links.items():
            links.add(Text(f'{label}: {url}'))
    return tree


def changelog_table(changelog: Changelog) -> Table:
    """Build a Rich table with one row per version."""
    table = Table(
        show_header=True,
        header_style='bold',
        show_edge=False,
        pad_edge=False,
    )
    table.add_column('Version', style='bold')
    table.add_column('Date')
    table.add_column('Yanked', justify='center')
    table.add_column('Changes', justify='right')
    table.add_column('Link', style='dim')

    for entry in changelog.versions:
        table.add_row(
            Text(entry.version),
            entry.date.isoformat() if entry.date is not None else '-',
            Text('yes', style='red') if entry.yanked else '',
            str(sum(len(items) for items in entry.changes.values())),
            Text(changelog.links.get(entry.version, '')),
        )
    return table


def print_changelog(
    changelog: Changelog,
    console: Console | None = None,
    *,
    summary: bool = False,
) -> None:
    """Print a parsed changelog with Rich formatting.

    Args:
        changelog: The parsed changelog.
        console: Rich :class:`Console` to print to.  When ``None``,
            a default ``Console()`` is created (auto-detects TTY).
        summary: Print a per-version table instead of the full tree.
    """
    if console is None:
        console = Console()
    console.print('Successfully parsed changelog!')
    console.print('---')
    console.print(changelog_table(changelog) if summary else changelog_tree(changelog))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='clog',
        description='Parse a Keep a Changelog file and show its structure.',
    )
    parser.add_argument('path', type=Path, help='Path to the CHANGELOG.md file.')
    parser.add_argument(
        '--summary',
        action='store_true',
        help='Show one row per version instead of the full tree.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument(
        '--json-log',
        action='store_true',
        default=json_log_default(),
        help='Log as JSON lines (default from CLOG_JSON_LOG).',
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the process exit code."""
    args = _build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    err = Console(stderr=True)

    path: Path = args.path
    try:
        text = path.read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as exc:
        err.print(Text(f"Error reading file '{path}': {exc}"))
        return 1
    logger.debug('read changelog', path=str(path), chars=len(text))

    try:
        changelog = parse_changelog(text)
    except ParseError as exc:
        logger.debug('parse failed', path=str(path), line=exc.line, column=exc.column)
        err.print('Failed to parse changelog:')
        err.print(Text(str(exc)))
        return 1

    logger.info('parsed changelog', path=str(path), versions=len(changelog.versions), links=len(changelog.links))
    print_changelog(changelog, summary=args.summary)
    return 0


__all__ = [
    'changelog_table',
    'changelog_tree',
    'main',
    'print_changelog',
]
