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
preoccupied.resolution.errors
Exceptions raised or recorded while resolving version selectors.

:license: GNU General Public License v3
"""


from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Tuple


if TYPE_CHECKING:
    from .conflict import ComponentState


__all__ = (
    "ConflictUnresolvableError",
    "InvalidSelectorError",
    "ModuleVersionNotFoundError",
    "ModuleVersionRejectedError",
    "ResolutionError",
)


class ResolutionError(Exception):
    """
    Base class for every error produced by this package.
    """


class InvalidSelectorError(ResolutionError, ValueError):
    """
    A version selector string could not be parsed, or a selector cannot be
    used the way it was asked to be.
    """


class ModuleVersionNotFoundError(ResolutionError):
    """
    No version of a module satisfied a selector.
    """

    def __init__(
            self,
            selector: str,
            message: Optional[str] = None,
            *,
            attempted_locations: Iterable[str] = (),
            unmatched_versions: Iterable[str] = ()) -> None:

        self.selector = selector
        self.attempted_locations: Tuple[str, ...] = tuple(attempted_locations)
        self.unmatched_versions: Tuple[str, ...] = tuple(unmatched_versions)

        if message is None:
            message = f"Could not find any version that matches {selector!r}."
            if self.unmatched_versions:
                listed = ", ".join(self.unmatched_versions)
                message += f" Versions that do not match: {listed}."
        super().__init__(message)


class ModuleVersionRejectedError(ModuleVersionNotFoundError):
    """
    Every version that would have satisfied a selector was rejected.
    """

    def __init__(
            self,
            selector: str,
            message: Optional[str] = None,
            *,
            attempted_locations: Iterable[str] = (),
            unmatched_versions: Iterable[str] = (),
            rejected_versions: Iterable[str] = ()) -> None:

        self.rejected_versions: Tuple[str, ...] = tuple(rejected_versions)

        if message is None:
            message = f"Could not find any version that matches {selector!r}."
            if self.rejected_versions:
                listed = ", ".join(self.rejected_versions)
                message += f" Versions rejected by constraints: {listed}."

        super().__init__(
            selector, message,
            attempted_locations=attempted_locations,
            unmatched_versions=unmatched_versions)


    @property
    def rejected_version(self) -> Optional[str]:
        """
        The first rejected version, or None when none were recorded.
        """

        return self.rejected_versions[0] if self.rejected_versions else None


class ConflictUnresolvableError(ResolutionError):
    """
    Conflict resolution could not choose between candidate components.
    """

    def __init__(
            self,
            message: str,
            candidates: Sequence["ComponentState"] = ()) -> None:

        super().__init__(message)
        self.candidates = tuple(candidates)


# The end.
