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
preoccupied.resolution.constraint

Version constraints attached to a dependency declaration.

A :class:`VersionConstraint` is the validated user input: a preferred
version string, rejected version strings and an optional strict version. It
is turned into a :class:`ResolvedVersionConstraint`, holding parsed
selectors, by a :class:`~preoccupied.resolution.scheme.VersionSelectorScheme`.

Example:

```python
constraint = VersionConstraint.of("[1.0,2.0)", reject=["1.5"])
resolved = constraint.resolve(VersionSelectorScheme())
assert resolved.preferred_selector.accept("1.4")
assert resolved.rejected_selector.accept("1.5")
```

:license: GNU General Public License v3
"""


from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .scheme import VersionSelectorScheme
from .selectors import EmptySelector, UnionSelector, VersionSelector


__all__ = (
    "ResolvedVersionConstraint",
    "VersionConstraint",
)


class VersionConstraint(BaseModel):
    """
    Declared version constraint. Immutable.
    """

    model_config = ConfigDict(frozen=True)

    prefer: str = ""
    reject: Tuple[str, ...] = ()
    strictly: Optional[str] = None


    @field_validator("prefer", mode="before")
    @classmethod
    def _strip_prefer(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


    @field_validator("strictly", mode="before")
    @classmethod
    def _strip_strictly(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


    @field_validator("reject", mode="before")
    @classmethod
    def _check_reject(cls, value):
        if isinstance(value, str):
            value = (value,)
        cleaned = []
        for entry in value:
            if not isinstance(entry, str) or not entry.strip():
                raise ValueError("Rejected versions must be non-empty strings.")
            cleaned.append(entry.strip())
        return tuple(cleaned)


    @model_validator(mode="after")
    def _check_strictly(self) -> "VersionConstraint":
        if self.strictly is not None and self.prefer and self.prefer != self.strictly:
            raise ValueError(
                f"Preferred version {self.prefer!r} conflicts with strict"
                f" version {self.strictly!r}.")
        return self


    @classmethod
    def of(
            cls,
            prefer: Optional[str] = "",
            reject: Iterable[str] = ()) -> "VersionConstraint":
        """
        Convenience constructor from a preferred version and rejections.
        """

        return cls(prefer=prefer, reject=tuple(reject))


    def strict(self) -> "VersionConstraint":
        """
        Return a copy of this constraint made strict on its preferred
        version, keeping the existing rejections.
        """

        return self.model_copy(update={"strictly": self.prefer or None})


    @property
    def preferred_version(self) -> str:
        return self.strictly if self.strictly is not None else self.prefer


    def resolve(self, scheme: VersionSelectorScheme) -> "ResolvedVersionConstraint":
        """
        Parse this constraint into selectors using `scheme`.
        """

        preferred = self.preferred_version
        prefer_selector = scheme.parse(preferred)

        rejects = [scheme.parse(text) for text in self.reject]
        if self.strictly is not None:
            rejects.insert(0, scheme.complement_for_rejection(prefer_selector))

        return ResolvedVersionConstraint(
            preferred_version=preferred,
            preferred_selector=prefer_selector,
            rejected_selector=UnionSelector(rejects),
            rejected_versions=self.reject,
        )


@dataclass(frozen=True)
class ResolvedVersionConstraint:
    """
    A constraint with its selectors parsed. The rejected selector is always
    a union, possibly empty.
    """

    preferred_version: str
    preferred_selector: VersionSelector
    rejected_selector: UnionSelector = UnionSelector()
    rejected_versions: Tuple[str, ...] = ()


    def __post_init__(self):
        if not self.preferred_version and not isinstance(self.preferred_selector, EmptySelector):
            raise ValueError("A constraint without a preferred version must use an EmptySelector.")

        rejected = self.rejected_selector
        if not isinstance(rejected, UnionSelector):
            object.__setattr__(self, "rejected_selector", UnionSelector((rejected,)))


    @property
    def is_reject_only(self) -> bool:
        return not self.preferred_version and len(self.rejected_selector) > 0


    def __str__(self) -> str:
        text = self.preferred_version or "<none>"
        if self.rejected_versions:
            text += " reject " + ", ".join(self.rejected_versions)
        return text


# The end.
