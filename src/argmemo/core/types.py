"""Core types for memoized callables.

This module defines the canonical types that form the interface between the
classifier, the key encoder, the cache store and the method registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property


class ArgumentShape(Enum):
    """Classification of a parameter list, fixed at registration time."""

    NONE = "none"
    ONE_POSITIONAL = "one_positional"
    ONE_KEYWORD = "one_keyword"
    MULTIPLE_REQUIRED = "multiple_required"
    SPLAT = "splat"
    DOUBLE_SPLAT = "double_splat"
    SPLAT_AND_DOUBLE_SPLAT = "splat_and_double_splat"


class ParamKind(Enum):
    REQUIRED_POSITIONAL = "req"
    OPTIONAL_POSITIONAL = "opt"
    REST_POSITIONAL = "rest"
    REQUIRED_KEYWORD = "keyreq"
    OPTIONAL_KEYWORD = "key"
    REST_KEYWORD = "keyrest"
    BLOCK = "block"


POSITIONAL_KINDS = frozenset(
    {ParamKind.REQUIRED_POSITIONAL, ParamKind.OPTIONAL_POSITIONAL, ParamKind.REST_POSITIONAL}
)
KEYWORD_KINDS = frozenset(
    {ParamKind.REQUIRED_KEYWORD, ParamKind.OPTIONAL_KEYWORD, ParamKind.REST_KEYWORD}
)
REQUIRED_KINDS = frozenset({ParamKind.REQUIRED_POSITIONAL, ParamKind.REQUIRED_KEYWORD})


class Visibility(Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class Scope(Enum):
    """Who owns the cache state: each instance, or the class object itself."""

    INSTANCE = "instance"
    CLASS = "class"


class KeyScheme(Enum):
    """Storage scheme for multi-argument shapes.

    FLAT:   composite tuple key in the owner-wide map (collision-safe)
    NESTED: per-method map keyed by the component tuple
    HASHED: raw integer hash in the owner-wide map (collision-unsafe)
    """

    FLAT = "flat"
    NESTED = "nested"
    HASHED = "hashed"


class Layout(Enum):
    """Physical partition of OwnerCacheState used by a descriptor."""

    SCALAR = "scalar"  # values[method_name]
    TABLE = "table"  # tables[method_name][key]
    SHARED = "shared"  # values[key], key indexed in hashes[method_name]


@dataclass(frozen=True)
class Parameter:
    """One declared parameter.

    Attributes:
        kind: Parameter kind.
        name: Declared name.
        keyword_ok: Whether a positional parameter may also be passed by name
            (Python positional-or-keyword parameters).
    """

    kind: ParamKind
    name: str
    keyword_ok: bool = True

    @property
    def is_positional(self) -> bool:
        return self.kind in POSITIONAL_KINDS


@dataclass(frozen=True)
class CallableDescriptor:
    """Registered metadata about one memoized method.

    Attributes:
        name: Method name, unique within its owner type.
        shape: ArgumentShape derived from ``parameters``.
        parameters: Declared parameters, owner parameter excluded.
        visibility: Visibility derived from the naming convention.
        scope: Whether instances or the class own the cache state.
        key_scheme: Storage scheme for multi-argument shapes.
        layout: Physical partition of the owner state.
        track_stats: Whether lookups move the owner's hit/miss counters.
        owner_name: Qualified name of the registering owner type.
    """

    name: str
    shape: ArgumentShape
    parameters: tuple[Parameter, ...] = ()
    visibility: Visibility = Visibility.PUBLIC
    scope: Scope = Scope.INSTANCE
    key_scheme: KeyScheme = KeyScheme.FLAT
    layout: Layout = Layout.SCALAR
    track_stats: bool = False
    owner_name: str = field(default="", compare=False)

    @cached_property
    def positional_count(self) -> int:
        """Number of parameters that can be filled by position."""
        return sum(1 for p in self.parameters if p.kind in POSITIONAL_KINDS)

    @cached_property
    def sole_parameter(self) -> Parameter | None:
        """The only parameter of a ONE_* shape, else None."""
        return self.parameters[0] if len(self.parameters) == 1 else None

    def __repr__(self) -> str:
        return f"<CallableDescriptor {self.owner_name}.{self.name} {self.shape.value}>"
