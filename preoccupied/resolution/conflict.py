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
preoccupied.resolution.conflict

Component states and the conflict resolvers that choose between them.

A :class:`ComponentState` is what a resolved candidate becomes once it
leaves the resolver. Failed candidates become states that are already
rejected and carry their error. When more than one state survives
resolution, a :class:`ConflictResolver` picks the winner.

Conflict resolvers may be named:

* ``"latest"`` / ``"newest"`` -- :class:`LatestConflictResolver`
* ``"oldest"`` / ``"earliest"`` -- :class:`OldestConflictResolver`

:license: GNU General Public License v3
"""


from typing import TYPE_CHECKING, Optional, Protocol, Sequence, Union

from .errors import (
    ConflictUnresolvableError, ModuleVersionRejectedError, ResolutionError)
from .results import CandidateResult, ModuleComponentIdentifier
from .version import SemverComparator, Version, VersionComparator, ensure_version


if TYPE_CHECKING:
    from .state import SelectorState


__all__ = (
    "ComponentState",
    "ComponentStateFactory",
    "ConflictResolver",
    "DefaultComponentStateFactory",
    "LatestConflictResolver",
    "OldestConflictResolver",
    "lookup_conflict_resolver",
)


class ComponentState:
    """
    A candidate component as seen by conflict resolution and its callers.
    """

    def __init__(
            self,
            result: CandidateResult,
            selector_state: Optional["SelectorState"] = None,
            *,
            version: Optional[Version] = None,
            rejected: bool = False) -> None:

        self.result = result
        self.selector_state = selector_state
        self.version = version if version is not None else result.version
        self._rejected = rejected or not result.succeeded


    @property
    def id(self) -> Optional[ModuleComponentIdentifier]:
        return self.result.id if self.result.succeeded else None


    @property
    def failure(self) -> Optional[ResolutionError]:
        return self.result.failure


    def reject(self) -> None:
        """
        Mark this component unusable. Callers report rejected winners as
        errors once the graph is complete.
        """

        self._rejected = True


    @property
    def is_rejected(self) -> bool:
        return self._rejected


    def __repr__(self) -> str:
        flag = " rejected" if self._rejected else ""
        if self.result.succeeded:
            return f"<ComponentState {self.result.id}{flag}>"
        return f"<ComponentState failed {self.version}{flag}: {self.failure}>"


class ComponentStateFactory(Protocol):
    """
    Protocol for turning candidate results into component states.
    """

    def build(
            self,
            result: CandidateResult,
            selector_state: "SelectorState") -> ComponentState:
        ...


class DefaultComponentStateFactory(ComponentStateFactory):
    """
    Builds a :class:`ComponentState` per result. A rejection failure is
    given the first version it rejected, so the rejected version can win
    conflict resolution and be reported.
    """

    def build(
            self,
            result: CandidateResult,
            selector_state: "SelectorState") -> ComponentState:

        if result.succeeded:
            return ComponentState(result, selector_state)

        version = None
        error = result.failure
        if isinstance(error, ModuleVersionRejectedError) and error.rejected_version:
            try:
                version = ensure_version(error.rejected_version)
            except (TypeError, ValueError):
                version = None

        return ComponentState(result, selector_state, version=version, rejected=True)


class ConflictResolver(Protocol):
    """
    Protocol for choosing one component among several candidates.
    """

    def select(self, candidates: Sequence[ComponentState]) -> ComponentState:
        """
        Return one of `candidates`.

        :raises ConflictUnresolvableError: when no candidate can be chosen.
        """

        ...


class _VersionConflictResolver(ConflictResolver):
    """
    Chooses by version order. Candidates without a version are only chosen
    when no candidate has one, and rejected candidates only when every
    versioned candidate is rejected. Ties go to the earliest candidate.
    """

    def __init__(self, comparator: Optional[VersionComparator] = None) -> None:
        self.comparator = comparator or SemverComparator()


    def _better(self, cmp: int) -> bool:
        raise NotImplementedError


    def select(self, candidates: Sequence[ComponentState]) -> ComponentState:
        if not candidates:
            raise ConflictUnresolvableError("No candidates to choose from.")

        versioned = [c for c in candidates if c.version is not None]
        if not versioned:
            return candidates[0]

        usable = [c for c in versioned if not c.is_rejected] or versioned

        best = usable[0]
        for candidate in usable[1:]:
            if self._better(self.comparator.compare(candidate.version, best.version)):
                best = candidate
        return best


class LatestConflictResolver(_VersionConflictResolver):
    """
    Chooses the newest version.
    """

    def _better(self, cmp: int) -> bool:
        return cmp > 0


class OldestConflictResolver(_VersionConflictResolver):
    """
    Chooses the oldest version.
    """

    def _better(self, cmp: int) -> bool:
        return cmp < 0


def lookup_conflict_resolver(
        name: str,
        comparator: Optional[VersionComparator] = None) -> Optional[ConflictResolver]:

    if name in ("latest", "newest"):
        return LatestConflictResolver(comparator)
    elif name in ("oldest", "earliest"):
        return OldestConflictResolver(comparator)
    else:
        return None


ConflictResolverLike = Union[str, ConflictResolver, None]


# The end.
