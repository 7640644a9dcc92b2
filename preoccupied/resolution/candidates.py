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
preoccupied.resolution.candidates

Candidate resolvers turn one constraint into a concrete component.

:class:`VersionListResolver` serves a fixed list of versions of a single
module, newest first, in the way a repository listing would.

Example:

```python
resolver = VersionListResolver(["9", "10", "11", "12", "13"])
scheme = VersionSelectorScheme()
constraint = VersionConstraint.of("[10,12]").resolve(scheme)
result = resolver.resolve(constraint, UnionSelector())
assert str(result.version) == "12.0.0"
```

:license: GNU General Public License v3
"""


import logging
from functools import cmp_to_key
from typing import Iterable, List, Optional, Protocol, Tuple

from .constraint import ResolvedVersionConstraint
from .errors import ModuleVersionNotFoundError, ModuleVersionRejectedError
from .results import CandidateResult, Failed, ModuleComponentIdentifier, Resolved
from .selectors import ExactSelector, VersionSelector, is_subset
from .version import (
    SemverComparator, Version, VersionComparator, VersionLike, ensure_version)


__all__ = (
    "CandidateResolver",
    "VersionListResolver",
)


logger = logging.getLogger(__name__)


class CandidateResolver(Protocol):
    """
    Protocol for resolving a single constraint to a component.
    """

    def resolve(
            self,
            constraint: ResolvedVersionConstraint,
            all_rejects: VersionSelector) -> CandidateResult:
        """
        Return a :class:`Resolved` result whose version is accepted by the
        constraint's preferred selector and not by `all_rejects`, or a
        :class:`Failed` result.

        When every version the preferred selector could accept is rejected,
        implementations must fail with a
        :class:`ModuleVersionRejectedError` without probing for candidates.
        """

        ...


class VersionListResolver(CandidateResolver):
    """
    Resolves constraints against an in-memory list of versions of one
    module. Candidates are probed newest first.

    Listed versions are parsed when they are added, so an entry which is
    not a version fails here rather than during resolution. Selectors see
    the parsed :class:`Version`; failures report the versions as listed.
    """

    def __init__(
            self,
            versions: Iterable[str],
            *,
            group: str = "org",
            module: str = "module",
            location: Optional[str] = None,
            comparator: Optional[VersionComparator] = None) -> None:

        self.group = group
        self.module = module
        self.location = location or f"memory:{group}:{module}"
        self.comparator = comparator or SemverComparator()

        self._versions: List[Tuple[Version, str]] = []
        for version in versions:
            self._versions.append(self._entry(version))
        self._sort()

        # number of candidate versions examined, across every resolve
        self.probe_count = 0


    @staticmethod
    def _entry(version: VersionLike) -> Tuple[Version, str]:
        listed = str(version).strip()
        return ensure_version(listed), listed


    def _sort(self) -> None:
        # newest first
        key = cmp_to_key(self.comparator.compare)
        self._versions.sort(key=lambda entry: key(entry[0]), reverse=True)


    @property
    def versions(self) -> List[str]:
        """
        The served versions as listed, newest first.
        """

        return [listed for _version, listed in self._versions]


    def add(self, version: VersionLike) -> None:
        """
        Serve an additional version.
        """

        self._versions.append(self._entry(version))
        self._sort()


    def resolve(
            self,
            constraint: ResolvedVersionConstraint,
            all_rejects: VersionSelector) -> CandidateResult:

        prefer = constraint.preferred_selector
        selector = constraint.preferred_version

        if is_subset(prefer, all_rejects):
            logger.debug("Every version of %r is rejected for %s:%s",
                         selector, self.group, self.module)
            return Failed(ModuleVersionRejectedError(
                selector,
                attempted_locations=(self.location,),
                rejected_versions=self._rejected_without_probing(prefer)))

        unmatched = []
        rejected = []

        for candidate, listed in self._versions:
            self.probe_count += 1

            if not prefer.accept(candidate):
                unmatched.append(listed)
            elif all_rejects.accept(candidate):
                rejected.append(listed)
            else:
                found = ModuleComponentIdentifier(
                    group=self.group,
                    module=self.module,
                    version=candidate)
                logger.debug("Resolved %r to %s", selector, found)
                return Resolved(found)

        if rejected:
            return Failed(ModuleVersionRejectedError(
                selector,
                attempted_locations=(self.location,),
                unmatched_versions=unmatched,
                rejected_versions=rejected))

        return Failed(ModuleVersionNotFoundError(
            selector,
            attempted_locations=(self.location,),
            unmatched_versions=unmatched))


    def _rejected_without_probing(self, prefer: VersionSelector) -> List[str]:
        if isinstance(prefer, ExactSelector):
            return [prefer.version]

        # reading the held listing is not a probe
        return [listed for version, listed in self._versions
                if prefer.accept(version)]


    def __contains__(self, version: VersionLike) -> bool:
        return any(self.comparator.compare(version, known) == 0
                   for known, _listed in self._versions)


# The end.
