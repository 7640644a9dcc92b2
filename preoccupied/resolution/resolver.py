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
preoccupied.resolution.resolver

Chooses one version of a module from every selector that refers to it.

Each selector is resolved to a candidate, sharing candidates between
selectors wherever one selector's candidate is acceptable to another. If a
single version satisfies every selector, resolution ends with that one
candidate. Otherwise the minimal set of candidates found is handed to a
conflict resolver. The winner is finally checked against every selector's
rejections.

Example:

```python
scheme = VersionSelectorScheme()
repository = VersionListResolver(["9", "10", "11", "12", "13"])

states = [
    SelectorState(VersionConstraint.of("[10,12]").resolve(scheme), repository),
    SelectorState(VersionConstraint.of("[11,13]").resolve(scheme), repository),
]

winner = SelectorStateResolver("latest").select_best(states)
assert str(winner.version) == "12.0.0"
```

:license: GNU General Public License v3
"""


import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .conflict import (
    ComponentState, ComponentStateFactory, ConflictResolver,
    ConflictResolverLike, DefaultComponentStateFactory,
    lookup_conflict_resolver)
from .errors import ConflictUnresolvableError
from .results import CandidateResult
from .selectors import UnionSelector
from .state import SelectorState
from .version import VersionComparator


__all__ = (
    "ResolveResults",
    "SelectorStateResolver",
    "all_rejects",
    "resolve_selectors",
)


logger = logging.getLogger(__name__)


def all_rejects(states: Sequence[SelectorState]) -> UnionSelector:
    """
    The union of every state's rejected selector.
    """

    return UnionSelector(state.rejected_selector for state in states)


class ResolveResults:
    """
    Candidate result per selector state, in the order states were first
    registered. States are keyed by identity.
    """

    def __init__(self) -> None:
        self.results: Dict[SelectorState, CandidateResult] = {}


    @staticmethod
    def included(state: SelectorState, candidate: CandidateResult) -> bool:
        """
        True when `candidate` is a success the state's preferred selector
        accepts without needing component metadata.
        """

        if not candidate.succeeded:
            return False
        prefer = state.preferred_selector
        return not prefer.requires_metadata() and prefer.accept(candidate.version)


    def already_have_resolution(self, state: SelectorState) -> bool:
        """
        Record an already-resolved candidate for `state` if one is
        compatible with it.
        """

        for discovered in self.results.values():
            if self.included(state, discovered):
                logger.debug("Sharing candidate %s with %s", discovered.id, state)
                self.results[state] = discovered
                return True
        return False


    def register_resolution(self, state: SelectorState, result: CandidateResult) -> None:
        """
        Record a freshly resolved result for `state`. A successful result is
        also given to every earlier state that accepts it.
        """

        if result.succeeded:
            for other in self.results:
                if self.included(other, result):
                    self.results[other] = result

        self.results[state] = result


    def candidates(self) -> List[Tuple[CandidateResult, SelectorState]]:
        """
        The distinct results, each paired with the first state mapped to it.
        """

        seen: List[Tuple[CandidateResult, SelectorState]] = []
        for state, result in self.results.items():
            if not any(result == known for known, _owner in seen):
                seen.append((result, state))
        return seen


    def items(self) -> Iterator[Tuple[SelectorState, CandidateResult]]:
        return iter(self.results.items())


    def __getitem__(self, state: SelectorState) -> CandidateResult:
        return self.results[state]


    def __contains__(self, state: SelectorState) -> bool:
        return state in self.results


    def __len__(self) -> int:
        return len(self.results)


def resolve_selectors(
        states: Sequence[SelectorState],
        rejects: Optional[UnionSelector] = None) -> ResolveResults:
    """
    Resolve every state, preferring candidates that several states accept.

    :param states: Selector states for one module, in declaration order.
    :param rejects: The combined rejections, computed from `states` when
      omitted.
    """

    if rejects is None:
        rejects = all_rejects(states)

    results = ResolveResults()
    for state in states:
        if results.already_have_resolution(state):
            continue

        logger.debug("Resolving %s", state)
        results.register_resolution(state, state.resolve(rejects))

    return results


class SelectorStateResolver:
    """
    Selects the best component for a module from a list of selector states.
    """

    def __init__(
            self,
            conflict_resolver: ConflictResolverLike = "latest",
            component_state_factory: Optional[ComponentStateFactory] = None,
            *,
            comparator: Optional[VersionComparator] = None) -> None:

        if conflict_resolver is None:
            conflict_resolver = "latest"
        if isinstance(conflict_resolver, str):
            found = lookup_conflict_resolver(conflict_resolver, comparator)
            if found is None:
                raise ValueError(f"Invalid conflict resolver: {conflict_resolver}")
            conflict_resolver = found

        self.conflict_resolver: ConflictResolver = conflict_resolver
        self.component_state_factory: ComponentStateFactory = (
            component_state_factory or DefaultComponentStateFactory())


    def select_best(self, states: Sequence[SelectorState]) -> ComponentState:
        """
        Resolve `states` and return the chosen component. The component may
        be rejected; it is never None.

        :raises ConflictUnresolvableError: when the conflict resolver cannot
          choose between candidates.
        """

        assert states, "select_best requires at least one selector state"

        rejects = all_rejects(states)
        logger.debug("Selecting among %d selectors, rejecting %r",
                     len(states), rejects.selector)

        factory = self.component_state_factory

        if len(states) == 1:
            state = states[0]
            candidates = [factory.build(state.resolve(rejects), state)]
        else:
            results = resolve_selectors(states, rejects)
            candidates = [factory.build(result, owner)
                          for result, owner in results.candidates()]

        assert candidates, "resolution produced no candidates"

        if len(candidates) == 1:
            winner = candidates[0]
        else:
            winner = self._resolve_conflict(candidates)

        self._check_rejects(winner, states)
        return winner


    def _resolve_conflict(self, candidates: List[ComponentState]) -> ComponentState:
        logger.debug("Resolving conflict between %r", candidates)

        try:
            winner = self.conflict_resolver.select(candidates)
        except ConflictUnresolvableError:
            raise
        except Exception as error:
            raise ConflictUnresolvableError(
                f"Conflict resolver failed: {error}", candidates) from error

        if not any(winner is candidate for candidate in candidates):
            raise ConflictUnresolvableError(
                f"Conflict resolver chose {winner!r}, which is not a candidate.",
                candidates)
        return winner


    @staticmethod
    def _check_rejects(winner: ComponentState, states: Sequence[SelectorState]) -> None:
        if winner.is_rejected or winner.version is None:
            return

        for state in states:
            if state.rejected_selector.accept(winner.version):
                logger.debug("%r is rejected by %s", winner, state)
                winner.reject()
                return


# The end.
