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
preoccupied.resolution.state

Per-selector resolution state.

A :class:`SelectorState` wraps one constraint and remembers the candidate
it last resolved to. Asking it to resolve again returns the remembered
candidate unless that candidate has since been rejected, in which case the
candidate resolver is consulted afresh.

:license: GNU General Public License v3
"""


import logging
from typing import Optional

from .candidates import CandidateResolver
from .constraint import ResolvedVersionConstraint
from .results import CandidateResult
from .selectors import VersionSelector


__all__ = (
    "SelectorState",
)


logger = logging.getLogger(__name__)


class SelectorState:
    """
    Resolution scratch pad for one constraint.

    States are compared by identity, so two states over equal constraints
    remain distinct entries when resolved together.
    """

    def __init__(
            self,
            constraint: ResolvedVersionConstraint,
            resolver: CandidateResolver) -> None:

        self.constraint = constraint
        self.resolver = resolver

        # last result produced by the resolver
        self.cached: Optional[CandidateResult] = None

        # resolver invocations made for a dynamic preferred selector
        self.dynamic_resolve_count = 0


    @property
    def preferred_selector(self) -> VersionSelector:
        return self.constraint.preferred_selector


    @property
    def rejected_selector(self) -> VersionSelector:
        return self.constraint.rejected_selector


    def resolve(self, all_rejects: VersionSelector) -> CandidateResult:
        """
        Return the candidate for this constraint, reusing the cached result
        unless its version is accepted by `all_rejects`.
        """

        cached = self.cached
        if cached is not None:
            if not cached.succeeded:
                return cached
            if not all_rejects.accept(cached.version):
                return cached
            logger.debug("Cached candidate %s for %s is now rejected",
                         cached.id, self)

        self.cached = self._resolve_version(all_rejects)
        return self.cached


    def _resolve_version(self, all_rejects: VersionSelector) -> CandidateResult:
        prefer = self.constraint.preferred_selector
        result = self.resolver.resolve(self.constraint, all_rejects)

        if prefer.is_dynamic():
            self.dynamic_resolve_count += 1

        return result


    def copy(self) -> "SelectorState":
        """
        A fresh state over the same constraint and resolver.
        """

        return SelectorState(self.constraint, self.resolver)


    def __repr__(self) -> str:
        return f"<SelectorState {self.constraint}>"


    def __str__(self) -> str:
        return str(self.constraint)


# The end.
