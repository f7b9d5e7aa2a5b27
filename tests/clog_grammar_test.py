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

"""Tests for the changelog grammar and its parse tree."""

from __future__ import annotations

import pytest
from clog.errors import GrammarError
from clog.grammar import Node, Rule, parse_tree


def _rules(node: Node) -> list[Rule]:
    return [child.rule for child in node.children]


def _find(node: Node, rule: Rule) -> list[Node]:
    """Collect every descendant of *node* with the given rule."""
    found: list[Node] = []
    for child in node.children:
        if child.rule is rule:
            found.append(child)
        found.extend(_find(child, rule))
    return found


# ── Top-level shape ──────────────────────────────────────────────────────


class TestFileShape:
    """Tests for the file production."""

    def test_empty_input(self) -> None:
        """Empty input is just EOI."""
        tree = parse_tree('')
        assert tree.rule is Rule.FILE
        assert _rules(tree) == [Rule.EOI]

    def test_full_document(self) -> None:
        """All four optional parts appear in order."""
        text = (
            '# Changelog\n'
            '\n'
            'Intro.\n'
            '\n'
            '## [1.0.0] - 2023-01-01\n'
            '### Added\n'
            '- A\n'
            '\n'
            '[1.0.0]: https://example.com/1.0.0\n'
        )
        tree = parse_tree(text)
        assert _rules(tree) == [
            Rule.TOP_LEVEL_HEADING,
            Rule.PREAMBLE,
            Rule.VERSIONS,
            Rule.LINKS,
            Rule.EOI,
        ]

    def test_heading_only(self) -> None:
        """A lone title has no preamble node."""
        tree = parse_tree('# Changelog\n')
        assert _rules(tree) == [Rule.TOP_LEVEL_HEADING, Rule.EOI]
        assert tree.children[0].text == '# Changelog\n'

    def test_heading_must_be_first_line(self) -> None:
        """A title after other text is part of the preamble."""
        tree = parse_tree('\n# Changelog\n')
        assert _rules(tree) == [Rule.PREAMBLE, Rule.EOI]
        assert tree.children[0].text == '\n# Changelog\n'

    def test_bare_hash_is_not_heading(self) -> None:
        """A ``#`` with no title text is preamble text."""
        tree = parse_tree('#\n')
        assert _rules(tree) == [Rule.PREAMBLE, Rule.EOI]

    def test_versions_without_preamble(self) -> None:
        """A document may start directly with a version heading."""
        tree = parse_tree('## [1.0.0]\n')
        assert _rules(tree) == [Rule.VERSIONS, Rule.EOI]

    def test_links_only(self) -> None:
        """A document of link definitions has only a links node."""
        tree = parse_tree('[1.0.0]: https://example.com\n')
        assert _rules(tree) == [Rule.LINKS, Rule.EOI]


# ── Preamble ─────────────────────────────────────────────────────────────


class TestPreamble:
    """Tests for the preamble production."""

    def test_keeps_line_terminators(self) -> None:
        """Preamble text is verbatim, blank lines included."""
        tree = parse_tree('# C\n\nOne.\n\nTwo.\n\n## [1.0.0]\n')
        preamble = tree.children[1]
        assert preamble.rule is Rule.PREAMBLE
        assert preamble.text == '\nOne.\n\nTwo.\n\n'
        assert preamble.line == 2

    def test_subheadings_are_text(self) -> None:
        """``###`` lines before the first version are plain text."""
        tree = parse_tree('# C\n### Notes\n## [1.0.0]\n')
        assert tree.children[1].text == '### Notes\n'

    def test_link_shaped_line_before_versions_is_text(self) -> None:
        """Only a trailing block of definitions counts as links."""
        tree = parse_tree('# C\n[kac]: https://keepachangelog.com\n\n## [1.0.0]\n')
        assert _rules(tree) == [Rule.TOP_LEVEL_HEADING, Rule.PREAMBLE, Rule.VERSIONS, Rule.EOI]
        assert '[kac]' in tree.children[1].text

    def test_crlf_preserved(self) -> None:
        """Windows line endings stay in the raw text."""
        tree = parse_tree('# C\r\nText\r\n')
        assert tree.children[0].text == '# C\r\n'
        assert tree.children[1].text == 'Text\r\n'


# ── Version header ───────────────────────────────────────────────────────


class TestVersionHeader:
    """Tests for the version_header production."""

    @staticmethod
    def _header(text: str) -> Node:
        return _find(parse_tree(text), Rule.VERSION_HEADER)[0]

    def test_version_and_date(self) -> None:
        """Label and date are separate sub-matches."""
        header = self._header('## [1.0.0] - 2023-01-01\n')
        assert _rules(header) == [Rule.VERSION, Rule.DATE]
        assert header.children[0].text == '1.0.0'
        assert header.children[1].text == '2023-01-01'

    def test_columns(self) -> None:
        """Sub-matches record their 1-based columns."""
        header = self._header('## [1.0.0] - 2023-01-01\n')
        assert header.children[0].column == 5
        assert header.children[1].column == 14

    def test_version_only(self) -> None:
        """Date and yanked marker are optional."""
        header = self._header('## [Unreleased]\n')
        assert _rules(header) == [Rule.VERSION]
        assert header.children[0].text == 'Unreleased'

    def test_yanked_after_date(self) -> None:
        """The yanked marker follows the date."""
        header = self._header('## [1.0.0] - 2023-01-01 [YANKED]\n')
        assert _rules(header) == [Rule.VERSION, Rule.DATE, Rule.YANKED]

    def test_yanked_without_date(self) -> None:
        """The yanked marker may appear without a date."""
        header = self._header('## [0.1.0] [YANKED]\n')
        assert _rules(header) == [Rule.VERSION, Rule.YANKED]

    def test_yanked_any_case(self) -> None:
        """The yanked marker is matched ignoring case."""
        header = self._header('## [0.1.0] - 2020-01-01 [yanked]\n')
        assert header.children[-1].rule is Rule.YANKED

    def test_prerelease_label(self) -> None:
        """Labels are opaque text."""
        header = self._header('## [1.0.0-beta.1+build.5] - 2023-01-01\n')
        assert header.children[0].text == '1.0.0-beta.1+build.5'

    def test_trailing_whitespace(self) -> None:
        """Trailing whitespace after the heading is allowed."""
        header = self._header('## [1.0.0] - 2023-01-01   \n')
        assert _rules(header) == [Rule.VERSION, Rule.DATE]

    def test_calendar_invalid_date_passes_grammar(self) -> None:
        """The grammar checks the date's shape only."""
        header = self._header('## [1.0.0] - 2023-02-30\n')
        assert header.children[1].text == '2023-02-30'


class TestVersionHeaderErrors:
    """Tests for malformed version headings."""

    def test_missing_bracket(self) -> None:
        """A version heading needs a bracketed label."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('# C\n## 1.0.0\n')
        err = exc_info.value
        assert (err.line, err.column) == (2, 4)
        assert err.expected == ('"["',)
        assert err.source_line == '## 1.0.0'

    def test_empty_label(self) -> None:
        """The label must not be empty."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## []\n')
        assert exc_info.value.expected == ('version',)
        assert exc_info.value.column == 5

    def test_unclosed_label(self) -> None:
        """The label must be closed with a bracket."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0\n')
        assert exc_info.value.expected == ('"]"',)

    def test_short_date(self) -> None:
        """Dates must be zero-padded YYYY-MM-DD."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0] - 2023-1-1\n')
        err = exc_info.value
        assert err.expected == ('date',)
        assert err.column == 14
        assert "'2023-1-1'" in str(err)

    def test_trailing_text(self) -> None:
        """Unexpected text after the label is reported with the alternatives."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0] released\n')
        err = exc_info.value
        assert err.expected == ('" - " date', 'yanked', 'end of line')
        assert err.column == 11

    def test_text_after_yanked(self) -> None:
        """Nothing may follow the yanked marker."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0] - 2023-01-01 [YANKED] oops\n')
        assert exc_info.value.expected == ('end of line',)

    def test_plain_subheading_in_preamble(self) -> None:
        """A ``##`` heading is always a version heading attempt."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('# C\n\n## Notes\n')
        assert exc_info.value.line == 3


# ── Version body ─────────────────────────────────────────────────────────


class TestVersionBody:
    """Tests for version_preamble and change_sections."""

    def test_version_preamble(self) -> None:
        """Text before the first change heading is the version preamble."""
        tree = parse_tree('## [1.0.0]\nSome notes.\n\n### Added\n- A\n')
        entry = _find(tree, Rule.VERSION_ENTRY)[0]
        assert _rules(entry) == [Rule.VERSION_HEADER, Rule.VERSION_PREAMBLE, Rule.CHANGE_SECTIONS]
        assert entry.children[1].text == 'Some notes.\n\n'

    def test_deeper_heading_in_version_preamble(self) -> None:
        """``####`` lines are free text."""
        tree = parse_tree('## [1.0.0]\n#### Highlights\n')
        assert _find(tree, Rule.VERSION_PREAMBLE)[0].text == '#### Highlights\n'

    def test_entry_without_sections(self) -> None:
        """A version heading may have no body at all."""
        tree = parse_tree('## [2.0.0]\n## [1.0.0]\n')
        entries = _find(tree, Rule.VERSION_ENTRY)
        assert len(entries) == 2
        assert all(_rules(e) == [Rule.VERSION_HEADER] for e in entries)

    def test_change_type_text(self) -> None:
        """The change type is the trimmed heading text."""
        tree = parse_tree('## [1.0.0]\n###   Security  \n- A\n')
        change_type = _find(tree, Rule.CHANGE_TYPE)[0]
        assert change_type.text == 'Security'
        assert change_type.column == 7

    def test_unknown_change_type_passes_grammar(self) -> None:
        """Any heading text is accepted by the grammar."""
        tree = parse_tree('## [1.0.0]\n### Unknown\n- A\n')
        assert _find(tree, Rule.CHANGE_TYPE)[0].text == 'Unknown'

    def test_empty_change_header(self) -> None:
        """A change heading needs text."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0]\n### \n')
        assert exc_info.value.expected == ('change_type',)
        assert exc_info.value.line == 2

    def test_section_without_items(self) -> None:
        """change_items is optional."""
        tree = parse_tree('## [1.0.0]\n### Added\n\n### Fixed\n- A\n')
        sections = _find(tree, Rule.CHANGE_SECTION)
        assert _rules(sections[0]) == [Rule.CHANGE_HEADER]
        assert _rules(sections[1]) == [Rule.CHANGE_HEADER, Rule.CHANGE_ITEMS]


# ── Change items ─────────────────────────────────────────────────────────


class TestChangeItems:
    """Tests for the change_item production."""

    @staticmethod
    def _items(body: str) -> list[str]:
        tree = parse_tree('## [1.0.0]\n### Added\n' + body)
        return [item.text for item in _find(tree, Rule.CHANGE_ITEM)]

    def test_single_line_items(self) -> None:
        """Each bullet is one item."""
        assert self._items('- A\n- B\n') == ['A\n', 'B\n']

    def test_blank_lines_between_items(self) -> None:
        """Blank lines separate items without ending the list."""
        assert self._items('- A\n\n- B\n') == ['A\n', 'B\n']

    def test_other_bullets(self) -> None:
        """``*`` and ``+`` bullets are accepted."""
        assert self._items('* A\n+ B\n') == ['A\n', 'B\n']

    def test_continuation_lines(self) -> None:
        """Indented lines continue the previous item verbatim."""
        assert self._items('- first\n  second\n\tthird\n- next\n') == [
            'first\n  second\n\tthird\n',
            'next\n',
        ]

    def test_continuation_after_blank_line(self) -> None:
        """A blank line followed by an indented line stays in the item."""
        assert self._items('- first\n\n  more\n- next\n') == ['first\n\n  more\n', 'next\n']

    def test_nested_list(self) -> None:
        """Nested bullets are continuation lines."""
        assert self._items('- parent\n  - child\n') == ['parent\n  - child\n']

    def test_item_column(self) -> None:
        """Items start after the bullet marker."""
        tree = parse_tree('## [1.0.0]\n### Added\n-   A\n')
        item = _find(tree, Rule.CHANGE_ITEM)[0]
        assert (item.line, item.column) == (3, 5)

    def test_last_line_without_newline(self) -> None:
        """The final item may lack a trailing newline."""
        assert self._items('- A\n- B') == ['A\n', 'B']

    def test_paragraph_after_items(self) -> None:
        """Unindented text is not allowed inside a change section."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0]\n### Added\n- A\nSome paragraph\n')
        err = exc_info.value
        assert (err.line, err.column) == (4, 1)
        assert err.expected == ('change_item', 'change_header', 'version_header', 'link_definition', 'EOI')
        assert "found 'Some'" in str(err)

    def test_indented_text_without_item(self) -> None:
        """Continuation lines need an item to continue."""
        with pytest.raises(GrammarError) as exc_info:
            parse_tree('## [1.0.0]\n### Added\n  orphan\n')
        assert (exc_info.value.line, exc_info.value.column) == (3, 3)

    def test_bare_bullet(self) -> None:
        """A bullet with no text is not an item."""
        with pytest.raises(GrammarError):
            parse_tree('## [1.0.0]\n### Added\n-\n')


# ── Links ────────────────────────────────────────────────────────────────


class TestLinks:
    """Tests for the links production."""

    def test_label_and_url(self) -> None:
        """A definition splits into label and URL."""
        tree = parse_tree('[1.0.0]: https://example.com/releases/1.0.0\n')
        definition = _find(tree, Rule.LINK_DEFINITION)[0]
        assert _rules(definition) == [Rule.LINK_VERSION, Rule.LINK_URL]
        assert definition.children[0].text == '1.0.0'
        assert definition.children[1].text == 'https://example.com/releases/1.0.0'

    def test_blank_lines_between_definitions(self) -> None:
        """Blank lines may separate definitions."""
        tree = parse_tree('## [1.0.0]\n\n[unreleased]: a\n\n[1.0.0]: b\n\n')
        labels = [n.text for n in _find(tree, Rule.LINK_VERSION)]
        assert labels == ['unreleased', '1.0.0']

    def test_url_verbatim(self) -> None:
        """The URL is not validated or normalized."""
        tree = parse_tree('[x]: not a url  \n')
        assert _find(tree, Rule.LINK_URL)[0].text == 'not a url'

    def test_links_after_items(self) -> None:
        """Definitions right after an item end the item list."""
        tree = parse_tree('## [1.0.0]\n### Added\n- A\n[1.0.0]: u\n')
        assert [n.text for n in _find(tree, Rule.CHANGE_ITEM)] == ['A\n']
        assert [n.text for n in _find(tree, Rule.LINK_URL)] == ['u']

    def test_link_inside_version_preamble_is_text(self) -> None:
        """A definition followed by a change heading is version text."""
        tree = parse_tree('## [1.0.0]\n[x]: y\n### Added\n- A\n')
        assert _find(tree, Rule.LINKS) == []
        assert _find(tree, Rule.VERSION_PREAMBLE)[0].text == '[x]: y\n'
