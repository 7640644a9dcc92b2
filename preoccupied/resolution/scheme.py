# This library is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This library is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this library; if not, see <http://www.gnu.org/licenses/>.

"""
preoccupied.resolution.scheme

Parses version selector strings into selectors.

Supported forms:

* ``""`` -- nothing is preferred
* ``1.2``, ``1.0.0+build.1`` -- an exact version; build metadata is kept
  but, as in semver precedence, ignored when comparing
* ``[1.0,2.0]``, ``[1.0,2.0)``, ``(1.0,2.0]``, ``]1.0,2.0[`` -- ranges,
  where ``(`` and ``]`` on the left (``)`` and ``[`` on the right) exclude
  the bound
* ``(,2.0)``, ``[1.0,)`` -- ranges open at one end
* ``[1.0]`` -- a range holding a single version
* ``[1.0,2.0),[3.0,4.0]`` -- a union of ranges
* ``1.+``, ``+`` -- a version prefix
* ``latest.release`` -- the newest version with a status

:license: GNU General Public License v3
"""


import re
from typing import Iterable, List, Optional, Union

from .errors import InvalidSelectorError
from .selectors import (
    UNBOUNDED, Bound, EmptySelector, ExactSelector, LatestSelector,
    PrefixSelector, RangeSelector, Unbounded, UnionSelector, VersionSelector)
from .version import SemverComparator, VersionComparator


__all__ = (
    "VersionSelectorScheme",
)


_BOUND = r"[^\s,\[\]()]*"

range_match = re.compile(
    r"\s*([\[\]()])\s*(" + _BOUND + r")\s*(?:(,)\s*(" + _BOUND + r")\s*)?([\[\]()])\s*"
).match

separator_match = re.compile(r"\s*,\s*").match

exact_match = re.compile(r"^[^\s,\[\]()]+$").match


class VersionSelectorScheme:
    """
    Builds selectors from strings, binding them to a version comparator.
    """

    def __init__(self, comparator: Optional[VersionComparator] = None) -> None:
        self.comparator = comparator or SemverComparator()


    def parse(self, selector: Optional[str]) -> VersionSelector:
        """
        Parse a selector string.

        :param selector: The selector text. ``None`` and blank strings
          produce an :class:`EmptySelector`.
        :raises InvalidSelectorError: when the text is not a selector.
        """

        if selector is None:
            return EmptySelector()

        text = selector.strip()
        if not text:
            return EmptySelector()

        if text[0] in "[](":
            ranges = self._parse_ranges(text)
            if len(ranges) == 1:
                return ranges[0]
            return UnionSelector(ranges)

        if text.startswith("latest."):
            status = text[len("latest."):]
            if not status:
                raise InvalidSelectorError(f"Missing status in selector {text!r}")
            return LatestSelector(status)

        if text.endswith("+"):
            prefix = text[:-1]
            if "+" in prefix or not (prefix == "" or prefix.endswith(".")):
                raise InvalidSelectorError(f"Invalid prefix selector {text!r}")
            return PrefixSelector(prefix)

        if not exact_match(text):
            raise InvalidSelectorError(f"Invalid version selector {text!r}")

        self._check_version(text, text)
        return ExactSelector(text, self.comparator)


    def parse_union(self, selectors: Iterable[str]) -> UnionSelector:
        """
        Parse several selector strings into a single union.
        """

        return UnionSelector(self.parse(text) for text in selectors)


    def render(self, selector: VersionSelector) -> str:
        """
        Return the string form of a selector.
        """

        return selector.selector


    def complement_for_rejection(self, selector: VersionSelector) -> UnionSelector:
        """
        Return a selector accepting every version that `selector` does not,
        for use as the reject half of a strict constraint.

        :raises InvalidSelectorError: when the selector cannot be inverted.
        """

        if isinstance(selector, ExactSelector):
            lower: Union[Bound, Unbounded] = Bound(selector.version)
            upper: Union[Bound, Unbounded] = Bound(selector.version)

        elif isinstance(selector, RangeSelector):
            lower = selector.lower
            upper = selector.upper

        else:
            raise InvalidSelectorError(
                f"Version {self.render(selector)!r} cannot be converted to a"
                " strict version constraint.")

        parts = []
        if isinstance(lower, Bound):
            below = Bound(lower.version, not lower.inclusive)
            parts.append(RangeSelector(UNBOUNDED, below, self.comparator))
        if isinstance(upper, Bound):
            above = Bound(upper.version, not upper.inclusive)
            parts.append(RangeSelector(above, UNBOUNDED, self.comparator))

        return UnionSelector(parts)


    def _parse_ranges(self, text: str) -> List[RangeSelector]:
        ranges = []
        pos = 0

        while True:
            found = range_match(text, pos)
            if found is None:
                raise InvalidSelectorError(f"Invalid version range {text!r}")
            ranges.append(self._build_range(text, *found.groups()))
            pos = found.end()

            if pos == len(text):
                return ranges

            sep = separator_match(text, pos)
            if sep is None:
                raise InvalidSelectorError(f"Invalid version range {text!r}")
            pos = sep.end()


    def _build_range(
            self,
            text: str,
            opening: str,
            low: str,
            comma: Optional[str],
            high: Optional[str],
            closing: str) -> RangeSelector:

        if opening == ")" or closing == "(":
            raise InvalidSelectorError(f"Invalid version range {text!r}")

        if comma is None:
            # "[1.0]" holds exactly one version
            if opening != "[" or closing != "]" or not low:
                raise InvalidSelectorError(f"Invalid version range {text!r}")
            self._check_version(low, text)
            bound = Bound(low, True)
            return RangeSelector(bound, bound, self.comparator)

        lower: Union[Bound, Unbounded] = UNBOUNDED
        if low:
            self._check_version(low, text)
            lower = Bound(low, opening == "[")

        upper: Union[Bound, Unbounded] = UNBOUNDED
        if high:
            self._check_version(high, text)
            upper = Bound(high, closing == "]")

        if isinstance(lower, Bound) and isinstance(upper, Bound):
            if self.comparator.compare(lower.version, upper.version) > 0:
                raise InvalidSelectorError(
                    f"Lower bound exceeds upper bound in {text!r}")

        return RangeSelector(lower, upper, self.comparator)


    def _check_version(self, version: str, text: str) -> None:
        try:
            self.comparator.compare(version, version)
        except (TypeError, ValueError) as error:
            raise InvalidSelectorError(
                f"Invalid version {version!r} in selector {text!r}") from error


# The end.
