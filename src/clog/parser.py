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

r"""Build a :class:`~clog.Changelog` from a changelog document.

The document is recognized once by :func:`clog.grammar.parse_tree`, then
the tree is walked once, top-down, turning each production into a piece
of the model.  Two checks happen during the walk that the grammar cannot
express:

- a ``date`` must be a real calendar date (``2023-02-30`` is rejected);
- a ``change_type`` must be one of the six Keep a Changelog categories.

Both raise a located :class:`~clog.errors.ParseError`.  A tree shape the
grammar cannot produce is a bug in this package and raises
:class:`AssertionError`.

Pure implementation — no I/O, no logging, no module state.

Usage::

    from clog.parser import parse_changelog

    changelog = parse_changelog(text)
    for entry in changelog.versions:
        print(entry.version, entry.date, sorted(c.value for c in entry.changes))
"""

from __future__ import annotations

import datetime

from clog._types import Changelog, ChangeType, VersionEntry
from clog.errors import InvalidDateError, UnknownChangeTypeError
from clog.grammar import Node, Rule, parse_tree

__all__ = [
    'parse_changelog',
]


def _unexpected(node: Node, where: str) -> AssertionError:
    return AssertionError(f'unexpected {node.rule.value} in {where} at line {node.line}')


def parse_changelog(text: str) -> Changelog:
    """Parse a Keep a Changelog document.

    Args:
        text: The full document text (not a path).

    Returns:
        The parsed :class:`~clog.Changelog`.

    Raises:
        GrammarError: If the document does not fit the grammar.
        InvalidDateError: If a version heading has an impossible date.
        UnknownChangeTypeError: If a ``###`` heading is not a known
            change category.

    Examples::

        >>> cl = parse_changelog('## [1.0.0] - 2023-01-01\\n### Added\\n- Thing\\n')
        >>> cl.versions[0].changes
        {<ChangeType.ADDED: 'Added'>: ['Thing']}
    """
    tree = parse_tree(text)

    preamble_parts: list[str] = []
    versions: list[VersionEntry] = []
    links: dict[str, str] = {}

    for node in tree.children:
        if node.rule in (Rule.TOP_LEVEL_HEADING, Rule.PREAMBLE):
            preamble_parts.append(node.text)
        elif node.rule is Rule.VERSIONS:
            versions.extend(_build_version_entry(entry) for entry in node.children)
        elif node.rule is Rule.LINKS:
            for definition in node.children:
                label, url = _build_link_definition(definition)
                links[label] = url
        elif node.rule is Rule.EOI:
            pass
        else:
            raise _unexpected(node, Rule.FILE.value)

    return Changelog(preamble=''.join(preamble_parts), versions=versions, links=links)


def _build_version_entry(node: Node) -> VersionEntry:
    version = ''
    date: datetime.date | None = None
    yanked = False
    preamble_parts: list[str] = []
    changes: dict[ChangeType, list[str]] = {}

    for inner in node.children:
        if inner.rule is Rule.VERSION_HEADER:
            for part in inner.children:
                if part.rule is Rule.VERSION:
                    version = part.text
                elif part.rule is Rule.DATE:
                    date = _parse_date(part)
                elif part.rule is Rule.YANKED:
                    yanked = True
                else:
                    raise _unexpected(part, Rule.VERSION_HEADER.value)
        elif inner.rule is Rule.VERSION_PREAMBLE:
            preamble_parts.append(inner.text)
        elif inner.rule is Rule.CHANGE_SECTIONS:
            for section in inner.children:
                change_type, items = _build_change_section(section)
                # A repeated heading replaces the earlier list; an empty
                # section leaves no key behind.
                if items:
                    changes[change_type] = items
                else:
                    changes.pop(change_type, None)
        else:
            raise _unexpected(inner, Rule.VERSION_ENTRY.value)

    preamble = ''.join(preamble_parts).strip()
    return VersionEntry(
        version=version,
        date=date,
        preamble=preamble or None,
        yanked=yanked,
        changes=changes,
    )


def _parse_date(node: Node) -> datetime.date:
    """Parse a ``YYYY-MM-DD`` date node, rejecting impossible dates."""
    try:
        return datetime.datetime.strptime(node.text, '%Y-%m-%d').date()
    except ValueError:
        raise InvalidDateError(node.source_line, node.line, node.column, node.text) from None


def _build_change_section(node: Node) -> tuple[ChangeType, list[str]]:
    change_type: ChangeType | None = None
    items: list[str] = []

    for inner in node.children:
        if inner.rule is Rule.CHANGE_HEADER:
            for part in inner.children:
                if part.rule is not Rule.CHANGE_TYPE:
                    raise _unexpected(part, Rule.CHANGE_HEADER.value)
                try:
                    change_type = ChangeType.from_str(part.text)
                except ValueError:
                    raise UnknownChangeTypeError(part.source_line, part.line, part.column, part.text) from None
        elif inner.rule is Rule.CHANGE_ITEMS:
            items.extend(item.text.strip() for item in inner.children)
        else:
            raise _unexpected(inner, Rule.CHANGE_SECTION.value)

    if change_type is None:
        raise AssertionError(f'change section without a header at line {node.line}')
    return change_type, items


def _build_link_definition(node: Node) -> tuple[str, str]:
    label = ''
    url = ''
    for inner in node.children:
        if inner.rule is Rule.LINK_VERSION:
            label = inner.text
        elif inner.rule is Rule.LINK_URL:
            url = inner.text
        else:
            raise _unexpected(inner, Rule.LINK_DEFINITION.value)
    return label, url
