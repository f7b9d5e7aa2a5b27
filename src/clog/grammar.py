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

r"""Grammar for `Keep a Changelog <https://keepachangelog.com/>`_ documents.

Recognizes a changelog and returns its parse tree.  The tree mirrors the
productions below one-to-one: every :class:`Node` is tagged with the
:class:`Rule` that produced it, and carries a copy of the text it
matched plus the line and column where it starts.

Grammar (PEG, line oriented)::

    file              = top_level_heading? preamble? versions? links? EOI
    top_level_heading = "#" WS+ TEXT NEWLINE              ; first line only
    preamble          = (!version_header_start !links_block LINE)*
    versions          = version_entry*
    version_entry     = version_header version_preamble? change_sections?
    version_header    = "##" WS+ "[" version "]"
                        (WS+ "-" WS+ date)? (WS+ yanked)? WS* NEWLINE
    version           = (!"]" CHAR)+
    date              = DIGIT{4} "-" DIGIT{2} "-" DIGIT{2}
    yanked            = "[YANKED]"                        ; any case
    version_preamble  = (!heading_start !links_block LINE)*
    change_sections   = change_section*
    change_section    = change_header change_items?
    change_header     = "###" WS+ change_type WS* NEWLINE
    change_type       = TEXT
    change_items      = (BLANK* change_item)* BLANK*
    change_item       = BULLET WS+ TEXT NEWLINE (BLANK* INDENTED_LINE)*
    links             = (BLANK* link_definition)* BLANK*
    link_definition   = "[" link_version "]:" WS* link_url WS* NEWLINE

Headings are recognized strictly by their leading markers: a line that
starts with ``##`` plus whitespace is a version heading, and inside a
version entry a line that starts with ``###`` plus whitespace is a change
heading.  A marked line that does not fit its production is a
:class:`~clog.errors.GrammarError` rather than free text.

``links_block`` is the trailing run of link definitions and blank lines
that reaches the end of input.  Link-shaped lines followed by anything
else are ordinary text.

The grammar only checks shape.  Whether a ``date`` is a real calendar
date, or a ``change_type`` is one of the six known categories, is left
to the tree walker in :mod:`clog.parser`.

Usage::

    from clog.grammar import Rule, parse_tree

    tree = parse_tree('## [1.0.0] - 2023-01-01\n### Added\n- Thing\n')
    assert tree.rule is Rule.FILE
    entry = tree.children[0].children[0]
    assert entry.rule is Rule.VERSION_ENTRY
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from clog.errors import GrammarError

__all__ = [
    'Node',
    'Rule',
    'parse_tree',
]


class Rule(Enum):
    """Grammar productions that appear in the parse tree."""

    FILE = 'file'
    TOP_LEVEL_HEADING = 'top_level_heading'
    PREAMBLE = 'preamble'
    VERSIONS = 'versions'
    VERSION_ENTRY = 'version_entry'
    VERSION_HEADER = 'version_header'
    VERSION = 'version'
    DATE = 'date'
    YANKED = 'yanked'
    VERSION_PREAMBLE = 'version_preamble'
    CHANGE_SECTIONS = 'change_sections'
    CHANGE_SECTION = 'change_section'
    CHANGE_HEADER = 'change_header'
    CHANGE_TYPE = 'change_type'
    CHANGE_ITEMS = 'change_items'
    CHANGE_ITEM = 'change_item'
    LINKS = 'links'
    LINK_DEFINITION = 'link_definition'
    LINK_VERSION = 'link_version'
    LINK_URL = 'link_url'
    EOI = 'EOI'


@dataclass(frozen=True)
class Node:
    """A node of the parse tree.

    Attributes:
        rule: The production that matched.
        text: The matched source text.  Multi-line nodes keep their
            original line terminators.
        line: 1-based line number where the match starts.
        column: 1-based column number where the match starts.
        source_line: The full starting line, without its terminator.
        children: Sub-matches, in source order.
    """

    rule: Rule
    text: str
    line: int
    column: int
    source_line: str
    children: tuple[Node, ...] = ()


# ---------------------------------------------------------------------------
# Line-level patterns
# ---------------------------------------------------------------------------

# Splits input into lines, keeping terminators.  Only "\n" ends a line;
# a preceding "\r" stays part of the raw text.
_LINE_RE = re.compile(r'[^\n]*\n|[^\n]+')

_TOP_LEVEL_HEADING_RE = re.compile(r'#[ \t]+\S')
_VERSION_HEADER_START_RE = re.compile(r'##(?:[ \t]|$)')
_CHANGE_HEADER_START_RE = re.compile(r'###(?:[ \t]|$)')
_BULLET_RE = re.compile(r'[-*+][ \t]+(?=\S)')
_LINK_DEFINITION_RE = re.compile(
    r'\[(?P<label>[^\]]+)\]:'  # [label]:
    r'[ \t]*'
    r'(?P<url>\S(?:.*\S)?)'  # url, verbatim
    r'[ \t]*$',
)

# Version header pieces, matched left to right so a failure can report
# the exact column.
_VERSION_MARKER_RE = re.compile(r'##[ \t]*')
_LBRACKET_RE = re.compile(r'\[')
_VERSION_RE = re.compile(r'[^\]]+')
_RBRACKET_RE = re.compile(r'\]')
_DATE_SEPARATOR_RE = re.compile(r'[ \t]+-[ \t]+')
_DATE_RE = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')
_YANKED_RE = re.compile(r'[ \t]+(\[YANKED\])', re.IGNORECASE)
_EOL_RE = re.compile(r'[ \t]*$')

# Change header pieces.
_CHANGE_MARKER_RE = re.compile(r'###[ \t]*')
_CHANGE_TYPE_RE = re.compile(r'\S(?:.*\S)?')

# What may follow the last item of a change section.
_AFTER_CHANGE_ITEMS: tuple[str, ...] = (
    Rule.CHANGE_ITEM.value,
    Rule.CHANGE_HEADER.value,
    Rule.VERSION_HEADER.value,
    Rule.LINK_DEFINITION.value,
    Rule.EOI.value,
)


@dataclass(frozen=True)
class _Line:
    number: int
    raw: str
    content: str

    @property
    def blank(self) -> bool:
        return not self.content.strip()

    @property
    def indented(self) -> bool:
        return self.content[:1] in (' ', '\t') and not self.blank


def _split_lines(text: str) -> list[_Line]:
    """Split *text* into numbered lines, keeping raw terminators."""
    lines: list[_Line] = []
    for number, m in enumerate(_LINE_RE.finditer(text), start=1):
        raw = m.group()
        content = raw[:-1] if raw.endswith('\n') else raw
        if content.endswith('\r'):
            content = content[:-1]
        lines.append(_Line(number, raw, content))
    return lines


def _describe(rest: str) -> str:
    """Describe the text found where a match failed."""
    words = rest.split()
    if not words:
        return 'end of line'
    return repr(words[0])


class _LineCursor:
    """Left-to-right matcher over a single line, for precise columns."""

    def __init__(self, line: _Line) -> None:
        self._line = line
        self.pos = 0

    def match(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        m = pattern.match(self._line.content, self.pos)
        if m is not None:
            self.pos = m.end()
        return m

    def expect(self, pattern: re.Pattern[str], *expected: str) -> re.Match[str]:
        m = self.match(pattern)
        if m is None:
            raise GrammarError(
                self._line.content,
                self._line.number,
                self.pos + 1,
                expected,
                found=_describe(self._line.content[self.pos :]),
            )
        return m

    def node(self, rule: Rule, m: re.Match[str], group: int | str = 0) -> Node:
        return Node(
            rule=rule,
            text=m.group(group),
            line=self._line.number,
            column=m.start(group) + 1,
            source_line=self._line.content,
        )


# ---------------------------------------------------------------------------
# Recursive descent recognizer
# ---------------------------------------------------------------------------


class _Grammar:
    """One-shot recognizer; create a fresh instance per document."""

    def __init__(self, text: str) -> None:
        self._lines = _split_lines(text)
        self._pos = 0
        self._links_start = self._find_links_start()

    def _find_links_start(self) -> int:
        """Index of the first line of the trailing link-definition block."""
        start = len(self._lines)
        for i in range(len(self._lines) - 1, -1, -1):
            line = self._lines[i]
            if line.blank:
                continue
            if _LINK_DEFINITION_RE.match(line.content) is None:
                break
            start = i
        return start

    def _peek(self) -> _Line | None:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def _at_version_header(self) -> bool:
        line = self._peek()
        return line is not None and _VERSION_HEADER_START_RE.match(line.content) is not None

    def _at_change_header(self) -> bool:
        line = self._peek()
        return line is not None and _CHANGE_HEADER_START_RE.match(line.content) is not None

    def _skip_blank(self) -> None:
        while (line := self._peek()) is not None and line.blank:
            self._pos += 1

    def _text_node(self, rule: Rule, lines: list[_Line]) -> Node:
        first = lines[0]
        return Node(
            rule=rule,
            text=''.join(line.raw for line in lines),
            line=first.number,
            column=1,
            source_line=first.content,
        )

    # file = top_level_heading? preamble? versions? links? EOI
    def parse_file(self) -> Node:
        children: list[Node] = []
        for production in (self._top_level_heading, self._preamble, self._versions, self._links):
            node = production()
            if node is not None:
                children.append(node)
        children.append(self._eoi())
        return Node(rule=Rule.FILE, text='', line=1, column=1, source_line='', children=tuple(children))

    def _top_level_heading(self) -> Node | None:
        line = self._peek()
        if line is None or _TOP_LEVEL_HEADING_RE.match(line.content) is None:
            return None
        self._pos += 1
        return self._text_node(Rule.TOP_LEVEL_HEADING, [line])

    # preamble = (!version_header_start !links_block LINE)*
    def _preamble(self) -> Node | None:
        lines: list[_Line] = []
        while self._pos < self._links_start and not self._at_version_header():
            lines.append(self._lines[self._pos])
            self._pos += 1
        if not lines:
            return None
        return self._text_node(Rule.PREAMBLE, lines)

    # versions = version_entry*
    def _versions(self) -> Node | None:
        entries: list[Node] = []
        while self._pos < self._links_start and self._at_version_header():
            entries.append(self._version_entry())
        if not entries:
            return None
        first = entries[0]
        return Node(
            rule=Rule.VERSIONS,
            text='',
            line=first.line,
            column=1,
            source_line=first.source_line,
            children=tuple(entries),
        )

    # version_entry = version_header version_preamble? change_sections?
    def _version_entry(self) -> Node:
        header = self._version_header()
        children = [header]
        preamble = self._version_preamble()
        if preamble is not None:
            children.append(preamble)
        sections = self._change_sections()
        if sections is not None:
            children.append(sections)
        return Node(
            rule=Rule.VERSION_ENTRY,
            text='',
            line=header.line,
            column=1,
            source_line=header.source_line,
            children=tuple(children),
        )

    # version_header = "##" WS+ "[" version "]" (WS+ "-" WS+ date)? (WS+ yanked)? WS* NEWLINE
    def _version_header(self) -> Node:
        line = self._lines[self._pos]
        cur = _LineCursor(line)
        cur.expect(_VERSION_MARKER_RE, Rule.VERSION_HEADER.value)
        cur.expect(_LBRACKET_RE, '"["')
        children = [cur.node(Rule.VERSION, cur.expect(_VERSION_RE, Rule.VERSION.value))]
        cur.expect(_RBRACKET_RE, '"]"')

        expected_next: list[str] = []
        if cur.match(_DATE_SEPARATOR_RE) is not None:
            children.append(cur.node(Rule.DATE, cur.expect(_DATE_RE, Rule.DATE.value)))
        else:
            expected_next.append('" - " date')
        m = cur.match(_YANKED_RE)
        if m is not None:
            children.append(cur.node(Rule.YANKED, m, 1))
        else:
            expected_next.append(Rule.YANKED.value)
        cur.expect(_EOL_RE, *expected_next, 'end of line')

        self._pos += 1
        return Node(
            rule=Rule.VERSION_HEADER,
            text=line.raw,
            line=line.number,
            column=1,
            source_line=line.content,
            children=tuple(children),
        )

    # version_preamble = (!heading_start !links_block LINE)*
    def _version_preamble(self) -> Node | None:
        lines: list[_Line] = []
        while self._pos < self._links_start and not (self._at_version_header() or self._at_change_header()):
            lines.append(self._lines[self._pos])
            self._pos += 1
        if not lines:
            return None
        return self._text_node(Rule.VERSION_PREAMBLE, lines)

    # change_sections = change_section*
    def _change_sections(self) -> Node | None:
        sections: list[Node] = []
        while self._pos < self._links_start and self._at_change_header():
            sections.append(self._change_section())
        if not sections:
            return None
        first = sections[0]
        return Node(
            rule=Rule.CHANGE_SECTIONS,
            text='',
            line=first.line,
            column=1,
            source_line=first.source_line,
            children=tuple(sections),
        )

    # change_section = change_header change_items?
    def _change_section(self) -> Node:
        header = self._change_header()
        children = [header]
        items = self._change_items()
        if items is not None:
            children.append(items)
        return Node(
            rule=Rule.CHANGE_SECTION,
            text='',
            line=header.line,
            column=1,
            source_line=header.source_line,
            children=tuple(children),
        )

    # change_header = "###" WS+ change_type WS* NEWLINE
    def _change_header(self) -> Node:
        line = self._lines[self._pos]
        cur = _LineCursor(line)
        cur.expect(_CHANGE_MARKER_RE, Rule.CHANGE_HEADER.value)
        change_type = cur.node(Rule.CHANGE_TYPE, cur.expect(_CHANGE_TYPE_RE, Rule.CHANGE_TYPE.value))
        cur.expect(_EOL_RE, 'end of line')
        self._pos += 1
        return Node(
            rule=Rule.CHANGE_HEADER,
            text=line.raw,
            line=line.number,
            column=1,
            source_line=line.content,
            children=(change_type,),
        )

    # change_items = (BLANK* change_item)* BLANK*
    def _change_items(self) -> Node | None:
        items: list[Node] = []
        while True:
            self._skip_blank()
            line = self._peek()
            if line is None or self._pos >= self._links_start:
                break
            m = _BULLET_RE.match(line.content)
            if m is None:
                break
            items.append(self._change_item(line, m))
        if not items:
            return None
        first = items[0]
        return Node(
            rule=Rule.CHANGE_ITEMS,
            text='',
            line=first.line,
            column=1,
            source_line=first.source_line,
            children=tuple(items),
        )

    # change_item = BULLET WS+ TEXT NEWLINE (BLANK* INDENTED_LINE)*
    def _change_item(self, line: _Line, bullet: re.Match[str]) -> Node:
        parts = [line.raw[bullet.end() :]]
        self._pos += 1
        while True:
            # Blank lines belong to the item only when an indented line follows.
            ahead = self._pos
            while ahead < self._links_start and self._lines[ahead].blank:
                ahead += 1
            if ahead >= self._links_start or not self._lines[ahead].indented:
                break
            parts.extend(self._lines[i].raw for i in range(self._pos, ahead + 1))
            self._pos = ahead + 1
        return Node(
            rule=Rule.CHANGE_ITEM,
            text=''.join(parts),
            line=line.number,
            column=bullet.end() + 1,
            source_line=line.content,
        )

    # links = (BLANK* link_definition)* BLANK*
    def _links(self) -> Node | None:
        if self._pos != self._links_start or self._pos >= len(self._lines):
            return None
        definitions: list[Node] = []
        while True:
            self._skip_blank()
            line = self._peek()
            if line is None:
                break
            m = _LINK_DEFINITION_RE.match(line.content)
            if m is None:  # pragma: no cover
                break
            cur = _LineCursor(line)
            definitions.append(
                Node(
                    rule=Rule.LINK_DEFINITION,
                    text=line.raw,
                    line=line.number,
                    column=1,
                    source_line=line.content,
                    children=(
                        cur.node(Rule.LINK_VERSION, m, 'label'),
                        cur.node(Rule.LINK_URL, m, 'url'),
                    ),
                ),
            )
            self._pos += 1
        first = definitions[0]
        return Node(
            rule=Rule.LINKS,
            text='',
            line=first.line,
            column=1,
            source_line=first.source_line,
            children=tuple(definitions),
        )

    def _eoi(self) -> Node:
        line = self._peek()
        if line is not None:
            # Only the lines after a change section's items can be left over.
            stripped = line.content.lstrip()
            raise GrammarError(
                line.content,
                line.number,
                len(line.content) - len(stripped) + 1,
                _AFTER_CHANGE_ITEMS,
                found=_describe(stripped),
            )
        last = self._lines[-1] if self._lines else None
        return Node(
            rule=Rule.EOI,
            text='',
            line=last.number + 1 if last is not None else 1,
            column=1,
            source_line='',
        )


def parse_tree(text: str) -> Node:
    """Recognize a changelog and return its parse tree.

    Args:
        text: The full changelog document.

    Returns:
        The root :class:`Node`, whose rule is :attr:`Rule.FILE`.

    Raises:
        GrammarError: If *text* does not conform to the grammar.  The
            error carries the line, column, and the rules that would
            have matched there.
    """
    return _Grammar(text).parse_file()
