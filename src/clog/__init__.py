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

r"""Parser for `Keep a Changelog <https://keepachangelog.com/>`_ documents.

Turns a ``CHANGELOG.md`` into a typed model:

- :class:`Changelog` — document preamble, version entries, link table
- :class:`VersionEntry` — label, date, yanked flag, preamble, changes
- :class:`ChangeType` — the six fixed change categories

Usage::

    from clog import ChangeType, parse_changelog

    changelog = parse_changelog(
        '# Changelog\n'
        '\n'
        '## [1.0.0] - 2023-01-01\n'
        '\n'
        '### Added\n'
        '\n'
        '- New feature A\n'
    )
    entry = changelog.versions[0]
    assert entry.version == '1.0.0'
    assert entry.changes[ChangeType.ADDED] == ['New feature A']

Malformed input raises a :class:`ParseError` subclass that names the
line and column::

    try:
        parse_changelog('## [1.0.0] - 2023-02-30\n')
    except InvalidDateError as exc:
        print(exc.line, exc.column)  # 1 14
"""

from clog._types import Changelog, ChangeType, VersionEntry
from clog.errors import GrammarError, InvalidDateError, ParseError, UnknownChangeTypeError
from clog.parser import parse_changelog

__all__ = [
    'ChangeType',
    'Changelog',
    'GrammarError',
    'InvalidDateError',
    'ParseError',
    'UnknownChangeTypeError',
    'VersionEntry',
    'parse_changelog',
]
