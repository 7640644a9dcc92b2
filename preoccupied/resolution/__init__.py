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
preoccupied.resolution
Namespace package segment selecting one version of a module from many
declared version constraints.

:license: GNU General Public License v3
"""


from .candidates import CandidateResolver, VersionListResolver
from .conflict import (
    ComponentState, ComponentStateFactory, ConflictResolver,
    DefaultComponentStateFactory, LatestConflictResolver,
    OldestConflictResolver, lookup_conflict_resolver)
from .constraint import ResolvedVersionConstraint, VersionConstraint
from .errors import (
    ConflictUnresolvableError, InvalidSelectorError,
    ModuleVersionNotFoundError, ModuleVersionRejectedError, ResolutionError)
from .resolver import (
    ResolveResults, SelectorStateResolver, all_rejects, resolve_selectors)
from .results import CandidateResult, Failed, ModuleComponentIdentifier, Resolved
from .scheme import VersionSelectorScheme
from .selectors import (
    UNBOUNDED, Bound, EmptySelector, ExactSelector, LatestSelector,
    PrefixSelector, RangeSelector, UnionSelector, VersionSelector, is_subset)
from .state import SelectorState
from .version import SemverComparator, Version, VersionComparator


__all__ = (
    "Version",
    "VersionComparator",
    "SemverComparator",

    "Bound",
    "UNBOUNDED",
    "EmptySelector",
    "ExactSelector",
    "LatestSelector",
    "PrefixSelector",
    "RangeSelector",
    "UnionSelector",
    "VersionSelector",
    "VersionSelectorScheme",
    "is_subset",

    "ResolvedVersionConstraint",
    "VersionConstraint",

    "CandidateResult",
    "Failed",
    "ModuleComponentIdentifier",
    "Resolved",

    "CandidateResolver",
    "VersionListResolver",
    "SelectorState",

    "ComponentState",
    "ComponentStateFactory",
    "ConflictResolver",
    "DefaultComponentStateFactory",
    "LatestConflictResolver",
    "OldestConflictResolver",
    "lookup_conflict_resolver",

    "ResolveResults",
    "SelectorStateResolver",
    "all_rejects",
    "resolve_selectors",

    "ConflictUnresolvableError",
    "InvalidSelectorError",
    "ModuleVersionNotFoundError",
    "ModuleVersionRejectedError",
    "ResolutionError",
)


# The end.
