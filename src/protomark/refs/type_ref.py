# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""References to message declarations by name, package wildcard, or union.

A type reference is written as text in schema options, for example::

    acme.sales.OrderPlaced          direct, fully-qualified
    OrderPlaced                     direct, relative to a package
    acme.sales.*                    every message in a package
    acme.sales.*,acme.billing.Paid  composite (any member matches)
    context                         the enclosing envelope of a message

Parsing is purely lexical. Matching is exact and case-sensitive.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from protomark.model.declarations import PACKAGE_SEPARATOR, MessageDecl

# ###############
# Public Interface
# ###############

WILDCARD = "*"
PACKAGE_WILDCARD = PACKAGE_SEPARATOR + WILDCARD
COMPOSITE_SEPARATOR = ","
CONTEXT_KEYWORD = "context"
CONTEXT_SUFFIX = "Context"


class InvalidReferenceError(ValueError):
    """Raised when reference text violates the reference grammar."""


class DirectTypeRef(BaseModel):
    """Reference to a single message by its full or package-relative name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["direct"] = "direct"
    name: str

    @property
    def package(self) -> str:
        """The package part of the name, or an empty string."""
        package, _ = _split_package(self.name)
        return package

    @property
    def has_package(self) -> bool:
        return bool(self.package)

    @property
    def nested_type_name(self) -> str:
        """The type part of the name, e.g. ``Outer.Inner``."""
        _, nested = _split_package(self.name)
        return nested

    @property
    def simple_type_name(self) -> str:
        return self.name.rsplit(PACKAGE_SEPARATOR, 1)[-1]


class PackageTypeRef(BaseModel):
    """Reference to all messages of a package; an empty package means all messages."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["package"] = "package"
    package: str = ""


MemberTypeRef = Annotated[DirectTypeRef | PackageTypeRef, _Field(discriminator="kind")]


class CompositeTypeRef(BaseModel):
    """A union of two or more direct or package references."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["composite"] = "composite"
    members: tuple[MemberTypeRef, ...]


class AnyTypeRef(BaseModel):
    """Builtin reference matching every message."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["any"] = "any"


class ContextTypeRef(BaseModel):
    """Builtin reference to the envelope (``*Context``) type of a message."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["context"] = "context"


# A type reference: one of the direct, package, composite, or builtin variants.
TypeRef = Annotated[
    DirectTypeRef | PackageTypeRef | CompositeTypeRef | AnyTypeRef | ContextTypeRef,
    _Field(discriminator="kind"),
]

ANY = AnyTypeRef()
CONTEXT = ContextTypeRef()


def parse_type_ref(raw: str) -> TypeRef | None:
    """Parse *raw* into a type reference, or return None if it is malformed.

    Resolution order: builtin keyword, package wildcard, composite, direct.
    """
    try:
        return type_ref_from(raw)
    except InvalidReferenceError:
        return None


def type_ref_from(raw: str) -> TypeRef:
    """Parse *raw* into a type reference.

    Surrounding whitespace is not part of the reference and is dropped.

    Raises:
        InvalidReferenceError: If *raw* does not match any variant's grammar.
            The message names the offending fragment.
    """
    value = raw.strip()
    if not value:
        raise InvalidReferenceError("A type reference cannot be empty")
    if value == CONTEXT_KEYWORD:
        return CONTEXT
    package = parse_package(value)
    if package is not None:
        return package
    if COMPOSITE_SEPARATOR in value:
        return parse_composite(value)
    return _parse_direct(value)


def parse_direct(raw: str) -> DirectTypeRef | None:
    """Parse a direct reference; wildcards, composites, and blanks yield None."""
    try:
        return _parse_direct(raw.strip())
    except InvalidReferenceError:
        return None


def parse_package(raw: str) -> PackageTypeRef | None:
    """Parse ``pkg.*`` or ``*``; anything else yields None."""
    try:
        return _parse_package(raw.strip())
    except InvalidReferenceError:
        return None


def parse_composite(raw: str) -> CompositeTypeRef:
    """Parse a comma-separated union of direct and package references.

    Raises:
        InvalidReferenceError: For fewer than two members, an empty member,
            a bare ``*`` member, or a malformed member.
    """
    parts = [part.strip() for part in raw.split(COMPOSITE_SEPARATOR)]
    if len(parts) < 2:
        raise InvalidReferenceError(
            f"A composite type reference must have at least two members. Found: `{raw}`."
        )
    members: list[DirectTypeRef | PackageTypeRef] = []
    for part in parts:
        if not part:
            raise InvalidReferenceError(f"Empty member in composite type reference `{raw}`.")
        if part == WILDCARD:
            raise InvalidReferenceError(
                f"A composite type reference cannot contain the bare wildcard. Found: `{raw}`."
            )
        if part.endswith(PACKAGE_WILDCARD):
            members.append(_parse_package(part))
        else:
            members.append(_parse_direct(part))
    return CompositeTypeRef(members=tuple(members))


def matches(ref: TypeRef, message: MessageDecl) -> bool:
    """Tell whether *message* is referenced by *ref*."""
    if isinstance(ref, DirectTypeRef):
        if ref.has_package:
            return message.full_name == ref.name
        if PACKAGE_SEPARATOR not in ref.name:
            return message.name == ref.name
        return message.nested_name == ref.name
    if isinstance(ref, PackageTypeRef):
        if not ref.package:
            return True
        return message.full_name.startswith(ref.package + PACKAGE_SEPARATOR)
    if isinstance(ref, CompositeTypeRef):
        return any(matches(member, message) for member in ref.members)
    if isinstance(ref, AnyTypeRef):
        return True
    if isinstance(ref, ContextTypeRef):
        return message.name.endswith(CONTEXT_SUFFIX)
    raise TypeError(f"Unsupported type reference: {ref!r}")


def ref_value(ref: TypeRef) -> str:
    """Return the textual form of *ref*, as it would be written in an option."""
    if isinstance(ref, DirectTypeRef):
        return ref.name
    if isinstance(ref, PackageTypeRef):
        return ref.package + PACKAGE_WILDCARD if ref.package else WILDCARD
    if isinstance(ref, CompositeTypeRef):
        return COMPOSITE_SEPARATOR.join(ref_value(member) for member in ref.members)
    if isinstance(ref, AnyTypeRef):
        return ""
    if isinstance(ref, ContextTypeRef):
        return CONTEXT_KEYWORD
    raise TypeError(f"Unsupported type reference: {ref!r}")


def with_package(ref: TypeRef, package: str) -> TypeRef:
    """Return a copy of *ref* with unqualified direct members moved into *package*.

    Already-qualified, wildcard, and builtin references are returned unchanged.
    """
    if not package:
        return ref
    if isinstance(ref, DirectTypeRef):
        return _relocate(ref, package)
    if isinstance(ref, CompositeTypeRef):
        return CompositeTypeRef(
            members=tuple(
                _relocate(member, package) if isinstance(member, DirectTypeRef) else member
                for member in ref.members
            )
        )
    return ref


# ################
# Implementation
# ################


def _split_package(name: str) -> tuple[str, str]:
    """Split a dotted name into its package and type parts.

    The package consists of the leading segments that do not start with an
    uppercase letter, following the Protobuf naming convention.
    """
    segments = name.split(PACKAGE_SEPARATOR)
    for index, segment in enumerate(segments):
        if segment[:1].isupper():
            return PACKAGE_SEPARATOR.join(segments[:index]), PACKAGE_SEPARATOR.join(segments[index:])
    # No capitalised segment: the last one is the type name.
    return PACKAGE_SEPARATOR.join(segments[:-1]), segments[-1]


def _relocate(ref: DirectTypeRef, package: str) -> DirectTypeRef:
    if ref.has_package:
        return ref
    return DirectTypeRef(name=package + PACKAGE_SEPARATOR + ref.name)


def _check_segments(value: str, raw: str) -> None:
    for segment in value.split(PACKAGE_SEPARATOR):
        if not segment.strip():
            raise InvalidReferenceError(f"The value `{raw}` contains an empty name segment.")


def _parse_direct(value: str) -> DirectTypeRef:
    if not value:
        raise InvalidReferenceError("A type reference cannot be empty")
    if WILDCARD in value:
        raise InvalidReferenceError(f"A direct type reference cannot contain a wildcard. Found: `{value}`.")
    if COMPOSITE_SEPARATOR in value:
        raise InvalidReferenceError(f"A direct type reference cannot be a list. Found: `{value}`.")
    _check_segments(value, value)
    return DirectTypeRef(name=value)


def _parse_package(value: str) -> PackageTypeRef:
    if value == WILDCARD:
        return PackageTypeRef()
    if not value.endswith(PACKAGE_WILDCARD):
        raise InvalidReferenceError(f"A package reference must end with `{PACKAGE_WILDCARD}`. Found: `{value}`.")
    package = value[: -len(PACKAGE_WILDCARD)]
    if not package or WILDCARD in package or COMPOSITE_SEPARATOR in package:
        raise InvalidReferenceError(f"Invalid package reference `{value}`.")
    _check_segments(package, value)
    return PackageTypeRef(package=package)
