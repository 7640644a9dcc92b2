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
preoccupied.resolution.version

Version values and the total order used to compare them.

Versions are ``semver`` versions parsed leniently, so ``"12"`` and
``"1.2"`` are accepted and normalised to ``12.0.0`` and ``1.2.0``. The
ordering is injected into selectors through a :class:`VersionComparator`;
:class:`SemverComparator` is the default.

:license: GNU General Public License v3
"""


from functools import lru_cache
from typing import Any, Callable, Protocol, Union

from semver import Version as SemVersion

from pydantic import GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema


__all__ = (
    "SemverComparator",
    "Version",
    "VersionComparator",
    "VersionLike",
    "ensure_version",
)


class Version(SemVersion):
    """
    Pydantic-compatible semantic version which tolerates missing minor and
    patch components.

    https://python-semver.readthedocs.io/en/3.0.4/advanced/combine-pydantic-and-semver.html
    """

    @classmethod
    def parse(
            cls,
            version: Union[str, bytes],
            optional_minor_and_patch: bool = True) -> "Version":

        return super().parse(
            version, optional_minor_and_patch=optional_minor_and_patch)


    @classmethod
    def __get_pydantic_core_schema__(
            cls,
            _source_type: Any,
            _handler: Callable[[Any], core_schema.CoreSchema]) -> core_schema.CoreSchema:

        from_str_schema = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                core_schema.no_info_plain_validator_function(ensure_version),
            ],
        )

        return core_schema.json_or_python_schema(
            json_schema=from_str_schema,
            python_schema=core_schema.union_schema(
                [
                    core_schema.is_instance_schema(Version),
                    core_schema.chain_schema(
                        [
                            core_schema.is_instance_schema(SemVersion),
                            core_schema.no_info_plain_validator_function(ensure_version),
                        ],
                    ),
                    from_str_schema,
                ]
            ),
            serialization=core_schema.to_string_ser_schema(),
        )


    @classmethod
    def __get_pydantic_json_schema__(
            cls,
            _core_schema: core_schema.CoreSchema,
            handler: GetJsonSchemaHandler) -> JsonSchemaValue:

        return handler(core_schema.str_schema())


VersionLike = Union[str, SemVersion]


@lru_cache(maxsize=1024)
def _parse(value: str) -> Version:
    return Version.parse(value.strip())


def ensure_version(value: Any) -> Version:
    """
    Convert supported inputs into a :class:`Version` instance.
    """

    if isinstance(value, Version):
        return value
    if isinstance(value, SemVersion):
        return Version(*value.to_tuple())
    if isinstance(value, str):
        return _parse(value)
    raise TypeError(f"Unsupported version value: {value!r}")


class VersionComparator(Protocol):
    """
    Protocol describing a total order over versions.
    """

    def compare(self, a: VersionLike, b: VersionLike) -> int:
        """
        Return a negative number, zero, or a positive number as `a` is less
        than, equal to, or greater than `b`.
        """

        ...


class SemverComparator(VersionComparator):
    """
    Orders versions by semantic version precedence.
    """

    def compare(self, a: VersionLike, b: VersionLike) -> int:
        return ensure_version(a).compare(ensure_version(b))


    def __repr__(self) -> str:
        return "SemverComparator()"


# The end.
