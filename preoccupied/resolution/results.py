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
preoccupied.resolution.results
Component identifiers and the outcome of resolving one constraint.

:license: GNU General Public License v3
"""


from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict
from typing_extensions import TypeAlias

from .errors import ResolutionError
from .version import Version


__all__ = (
    "CandidateResult",
    "Failed",
    "ModuleComponentIdentifier",
    "Resolved",
)


class ModuleComponentIdentifier(BaseModel):
    """
    Identifies one version of a module.
    """

    model_config = ConfigDict(frozen=True)

    group: str
    module: str
    version: Version


    @property
    def display_name(self) -> str:
        return f"{self.group}:{self.module}:{self.version}"


    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class Resolved:
    """
    A constraint resolved to a concrete component.
    """

    id: ModuleComponentIdentifier

    succeeded = True

    @property
    def version(self) -> Version:
        return self.id.version

    @property
    def failure(self) -> None:
        return None


@dataclass(frozen=True)
class Failed:
    """
    A constraint that could not be resolved.
    """

    error: ResolutionError

    succeeded = False

    @property
    def version(self) -> None:
        return None

    @property
    def failure(self) -> ResolutionError:
        return self.error


CandidateResult: TypeAlias = Union[Resolved, Failed]


# The end.
