"""Access modes and access types.

Provides:
- ``AccessMode``: the capability tokens (Read / Write / Append / Control).
- ``AccessType``: direct (``acl:accessTo``) vs inherited (``acl:default``).
- ``ALL_MODES``: modes granted on an ACL resource to whoever controls it.
- ``as_modes()``: normalise user input into a list of AccessMode.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Union

from ..vocab import ACL, ACL_NS


class AccessMode(str, Enum):
    """A single access mode.

    Values are the ACL vocabulary IRIs, so a mode compares equal to the
    object of an ``acl:mode`` triple.

    Implication: ``WRITE`` implies ``APPEND``. Nothing else implies
    anything. The implication is evaluated at query time by
    :meth:`implies`, never stored.
    """

    READ = ACL_NS + "Read"
    WRITE = ACL_NS + "Write"
    APPEND = ACL_NS + "Append"
    CONTROL = ACL_NS + "Control"

    @classmethod
    def parse(cls, value: Union[str, "AccessMode"]) -> "AccessMode":
        """Resolve a mode from an enum member, a full IRI, or a short name.

        Accepted short names are case-insensitive, with or without the
        ``acl:`` prefix: ``"read"``, ``"Write"``, ``"acl:Control"``.

        Raises:
            ValueError: If the value names no known mode.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
            name = value[len("acl:"):] if value.startswith("acl:") else value
            try:
                return cls[name.upper()]
            except KeyError:
                pass
        raise ValueError(f"Unknown access mode: {value!r}")

    def implies(self, other: "AccessMode") -> bool:
        """Does holding this mode satisfy a request for ``other``?"""
        return self is other or (self is AccessMode.WRITE and other is AccessMode.APPEND)


class AccessType(str, Enum):
    """How a permission reaches its resource.

    Values are the predicate IRIs used when serializing.
    """

    ACCESS_TO = ACL.ACCESS_TO
    DEFAULT = ACL.DEFAULT


ALL_MODES: tuple[AccessMode, ...] = (AccessMode.READ, AccessMode.WRITE, AccessMode.CONTROL)

ModeInput = Union[str, AccessMode, Iterable[Union[str, AccessMode]], None]


def as_modes(modes: ModeInput) -> list[AccessMode]:
    """Normalise one mode or an iterable of modes into a list.

    Example::

        as_modes("read")                                # [AccessMode.READ]
        as_modes([AccessMode.WRITE, "acl:Control"])     # [WRITE, CONTROL]
        as_modes(None)                                  # []
    """
    if modes is None:
        return []
    if isinstance(modes, str):
        return [AccessMode.parse(modes)]
    return [AccessMode.parse(mode) for mode in modes]


__all__ = [
    "ALL_MODES",
    "AccessMode",
    "AccessType",
    "ModeInput",
    "as_modes",
]
