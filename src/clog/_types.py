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

"""Pure types for a parsed changelog.

This module has **zero** runtime dependencies beyond the standard library.
Everything here is a frozen dataclass or enum — no I/O, no logging, no
side effects.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum


class ChangeType(Enum):
    """The six change categories defined by Keep a Changelog.

    The set is closed: :meth:`from_str` raises for anything else, so an
    unexpected ``### Whatever`` heading can never slip through as a
    free-form key.
    """

    ADDED = 'Added'
    CHANGED = 'Changed'
    DEPRECATED = 'Deprecated'
    REMOVED = 'Removed'
    FIXED = 'Fixed'
    SECURITY = 'Security'

    @classmethod
    def from_str(cls, text: str) -> ChangeType:
        """Look up a change type by heading text, ignoring case.

        >>> ChangeType.from_str('added')
        <ChangeType.ADDED: 'Added'>
        >>> ChangeType.from_str('SECURITY')
        <ChangeType.SECURITY: 'Security'>

        Raises:
            ValueError: If *text* is not one of the six categories.
        """
        wanted = text.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f'unknown change type {text!r}')


@dataclass(frozen=True)
class VersionEntry:
    """One ``## [version]`` block of a changelog.

    Attributes:
        version: The raw label between the heading's brackets
            (e.g. ``"1.0.0"``, ``"Unreleased"``, ``"1.0.0-beta.1"``).
            Not interpreted as semver.
        date: The release date, or ``None`` if the heading has none.
        preamble: Free text between the heading and the first change
            subheading, with outer whitespace trimmed.  ``None`` when
            there is no such text.
        yanked: Whether the heading carries a ``[YANKED]`` marker.
        changes: Items per change category, in source order.  Lists are
            never empty: a heading without items leaves no key.  A
            category that appears twice in one version keeps only the
            later list.
    """

    version: str
    date: datetime.date | None = None
    preamble: str | None = None
    yanked: bool = False
    changes: dict[ChangeType, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Changelog:
    """A fully parsed changelog document.

    Attributes:
        preamble: Everything before the first version heading, including
            the top-level ``#`` heading, verbatim.
        versions: Version entries in document order.
        links: Reference-style link definitions, label to URL.  A label
            defined twice keeps the later URL.
    """

    preamble: str = ''
    versions: list[VersionEntry] = field(default_factory=list)
    links: dict[str, str] = field(default_factory=dict)
