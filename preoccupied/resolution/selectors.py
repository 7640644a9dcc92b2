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
preoccupied.resolution.selectors

Version selectors: predicates over versions.

The set of selector shapes is closed. Every selector answers
:meth:`accept` for a candidate version and reports whether it is dynamic
(may match more than one version) and whether acceptance would need
component metadata that a bare version cannot provide.

Example:

```python
scheme = VersionSelectorScheme()
selector = scheme.parse("[1.0,2.0)")
assert selector.accept("1.5")
assert not selector.accept("2.0")
assert is_subset(scheme.parse("1.2"), selector)
```

:license: GNU General Public License v3
"""


from dataclasses import dataclass, field
from typing import Tuple, Union

from typing_extensions import TypeAlias

from .version import (
    SemverComparator, VersionComparator, VersionLike, ensure_version)


__all__ = (
    "Bound",
    "EmptySelector",
    "ExactSelector",
    "LatestSelector",
    "PrefixSelector",
    "RangeSelector",
    "UNBOUNDED",
    "Unbounded",
    "UnionSelector",
    "VersionSelector",
    "is_subset",
)


_DEFAULT_COMPARATOR = SemverComparator()


class Unbounded:
    """
    Marker for the open end of a range.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance


    def __repr__(self) -> str:
        return "UNBOUNDED"


UNBOUNDED = Unbounded()


@dataclass(frozen=True)
class Bound:
    """
    One end of a :class:`RangeSelector`.
    """

    version: str
    inclusive: bool = True


@dataclass(frozen=True)
class EmptySelector:
    """
    Accepts nothing. Used as the preferred selector of a reject-only
    constraint.
    """

    @property
    def selector(self) -> str:
        return ""


    def accept(self, version: VersionLike) -> bool:
        return False


    def requires_metadata(self) -> bool:
        return False


    def is_dynamic(self) -> bool:
        return False


@dataclass(frozen=True)
class ExactSelector:
    """
    Accepts exactly one version, as decided by the comparator.
    """

    version: str
    comparator: VersionComparator = field(
        default=_DEFAULT_COMPARATOR, compare=False, repr=False)


    @property
    def selector(self) -> str:
        return self.version


    def accept(self, version: VersionLike) -> bool:
        return self.comparator.compare(self.version, version) == 0


    def requires_metadata(self) -> bool:
        return False


    def is_dynamic(self) -> bool:
        return False


@dataclass(frozen=True)
class RangeSelector:
    """
    Accepts versions between two bounds. Either end may be
    :data:`UNBOUNDED`.
    """

    lower: Union[Bound, Unbounded] = UNBOUNDED
    upper: Union[Bound, Unbounded] = UNBOUNDED
    comparator: VersionComparator = field(
        default=_DEFAULT_COMPARATOR, compare=False, repr=False)


    @property
    def selector(self) -> str:
        if isinstance(self.lower, Bound):
            low = ("[" if self.lower.inclusive else "(") + self.lower.version
        else:
            low = "("
        if isinstance(self.upper, Bound):
            high = self.upper.version + ("]" if self.upper.inclusive else ")")
        else:
            high = ")"
        return f"{low},{high}"


    def accept(self, version: VersionLike) -> bool:
        lower = self.lower
        if isinstance(lower, Bound):
            cmp = self.comparator.compare(version, lower.version)
            if cmp < 0 or (cmp == 0 and not lower.inclusive):
                return False

        upper = self.upper
        if isinstance(upper, Bound):
            cmp = self.comparator.compare(version, upper.version)
            if cmp > 0 or (cmp == 0 and not upper.inclusive):
                return False

        return True


    def requires_metadata(self) -> bool:
        return False


    def is_dynamic(self) -> bool:
        return True


@dataclass(frozen=True)
class PrefixSelector:
    """
    Accepts versions whose canonical string starts with the given prefix,
    eg. ``1.+`` matches ``1.0.0`` and ``1.9.3``. A bare ``+`` accepts every
    version.
    """

    prefix: str


    @property
    def selector(self) -> str:
        return self.prefix + "+"


    def accept(self, version: VersionLike) -> bool:
        return str(ensure_version(version)).startswith(self.prefix)


    def requires_metadata(self) -> bool:
        return False


    def is_dynamic(self) -> bool:
        return True


@dataclass(frozen=True)
class LatestSelector:
    """
    Selects the newest version with at least the given status, eg.
    ``latest.release``. Status lives in component metadata, so a bare version
    is always accepted and the selector reports that it requires metadata.
    """

    status: str


    @property
    def selector(self) -> str:
        return f"latest.{self.status}"


    def accept(self, version: VersionLike) -> bool:
        return True


    def requires_metadata(self) -> bool:
        return True


    def is_dynamic(self) -> bool:
        return True


@dataclass(frozen=True)
class UnionSelector:
    """
    Accepts a version if any of its children do. A union without children
    accepts nothing.
    """

    selectors: Tuple["VersionSelector", ...] = ()


    def __post_init__(self):
        # accept lists and generators, store an immutable tuple
        object.__setattr__(self, "selectors", tuple(self.selectors))


    @property
    def selector(self) -> str:
        return ",".join(child.selector for child in self.selectors
                        if child.selector)


    def accept(self, version: VersionLike) -> bool:
        return any(child.accept(version) for child in self.selectors)


    def requires_metadata(self) -> bool:
        return any(child.requires_metadata() for child in self.selectors)


    def is_dynamic(self) -> bool:
        return any(child.is_dynamic() for child in self.selectors)


    def __len__(self) -> int:
        return len(self.selectors)


VersionSelector: TypeAlias = Union[
    EmptySelector,
    ExactSelector,
    RangeSelector,
    PrefixSelector,
    LatestSelector,
    UnionSelector,
]


def _lower_covers(constraint: RangeSelector, test: RangeSelector) -> bool:
    outer = constraint.lower
    inner = test.lower

    if not isinstance(outer, Bound):
        return True
    if not isinstance(inner, Bound):
        return False

    cmp = constraint.comparator.compare(outer.version, inner.version)
    if cmp == 0:
        return outer.inclusive or not inner.inclusive
    return cmp < 0


def _upper_covers(constraint: RangeSelector, test: RangeSelector) -> bool:
    outer = constraint.upper
    inner = test.upper

    if not isinstance(outer, Bound):
        return True
    if not isinstance(inner, Bound):
        return False

    cmp = constraint.comparator.compare(outer.version, inner.version)
    if cmp == 0:
        return outer.inclusive or not inner.inclusive
    return cmp > 0


def _is_range_subset(test: RangeSelector, constraint: VersionSelector) -> bool:
    if isinstance(constraint, RangeSelector):
        return _lower_covers(constraint, test) and _upper_covers(constraint, test)

    if isinstance(constraint, UnionSelector):
        return any(_is_range_subset(test, child) for child in constraint.selectors)

    # a closed range where low == high could be covered by an exact
    # selector, but that case is left unrecognised
    return False


def is_subset(test: VersionSelector, constraint: VersionSelector) -> bool:
    """
    True when every version accepted by `test` is known to be accepted by
    `constraint`. Shapes that cannot be compared report False.
    """

    if isinstance(test, ExactSelector):
        return constraint.accept(test.version)

    if isinstance(test, RangeSelector):
        return _is_range_subset(test, constraint)

    return False


# The end.
