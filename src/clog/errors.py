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

"""Errors raised while parsing a changelog.

Every error is fatal to the :func:`~clog.parser.parse_changelog` call
and carries the 1-based line and column of the offending text::

    ParseError                  base class (a ValueError)
    ├── GrammarError            input does not fit the grammar
    ├── InvalidDateError        YYYY-MM-DD that is not a real date
    └── UnknownChangeTypeError  ### heading outside the closed set
"""

from __future__ import annotations

__all__ = [
    'GrammarError',
    'InvalidDateError',
    'ParseError',
    'UnknownChangeTypeError',
]


class ParseError(ValueError):
    """Raised when a changelog cannot be parsed.

    Attributes:
        source_line: The full text of the offending line, without its
            line terminator.
        line: 1-based line number.
        column: 1-based column number.
        detail: Human-readable description of the problem.
    """

    def __init__(self, source_line: str, line: int, column: int, detail: str) -> None:
        """Initialize with the offending line, its location, and a detail message."""
        self.source_line = source_line
        self.line = line
        self.column = column
        self.detail = detail
        marker = ' ' * (column - 1) + '^'
        super().__init__(f'line {line}, column {column}: {detail}\n  {source_line}\n  {marker}')


class GrammarError(ParseError):
    """The input does not conform to the changelog grammar.

    Attributes:
        expected: Names of the grammar rules that would have matched at
            the failure location, in the order they were tried.
    """

    def __init__(
        self,
        source_line: str,
        line: int,
        column: int,
        expected: tuple[str, ...],
        found: str = '',
    ) -> None:
        """Initialize with the location and the rules that would have matched."""
        self.expected = expected
        detail = f'expected {", ".join(expected)}'
        if found:
            detail += f', found {found}'
        super().__init__(source_line, line, column, detail)


class InvalidDateError(ParseError):
    """A version heading's date is not a valid calendar date.

    Attributes:
        date_text: The date text as written (e.g. ``"2023-02-30"``).
    """

    def __init__(self, source_line: str, line: int, column: int, date_text: str) -> None:
        """Initialize with the location and the offending date text."""
        self.date_text = date_text
        super().__init__(source_line, line, column, f'invalid date {date_text!r}')


class UnknownChangeTypeError(ParseError):
    """A ``###`` heading names a category outside the closed set.

    Attributes:
        change_type: The heading text as written.
    """

    def __init__(self, source_line: str, line: int, column: int, change_type: str) -> None:
        """Initialize with the location and the unrecognized heading text."""
        self.change_type = change_type
        super().__init__(
            source_line,
            line,
            column,
            f'unknown change type {change_type!r} '
            '(expected one of Added, Changed, Deprecated, Removed, Fixed, Security)',
        )
