"""Type definitions and helpers for nil.

This module defines the structured type descriptions produced by the type
parser (`TypeExpr` and its parts), the named record layouts a caller may
bind in an environment, the target layout parameters, and small helpers
for classifying runtime values (Python `int` and `bool`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union


PRIMITIVE_NAMES = (
    'u8', 'i8', 'u16', 'i16', 'u32', 'i32', 'u64', 'i64',
    'uw', 'iw', 'f32', 'f64', 'fn',
)

# Representable integers: the union of the i64 and u64 ranges.
INT_MIN = -(1 << 63)
INT_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class Primitive:
    """One of the fixed scalar names, e.g. `u32` or `fn`."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Named:
    """Reference to a type bound in the environment."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LiteralBound:
    text: str  # literal as written, radix prefix and separators kept

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class NamedBound:
    name: str

    def __str__(self) -> str:
        return self.name


ArrayBound = Union[LiteralBound, NamedBound]


@dataclass(frozen=True)
class Pointer:
    def __str__(self) -> str:
        return '*'


@dataclass(frozen=True)
class Array:
    """Array suffix. A bound of None is the unsized `[]` form."""
    bound: Optional[ArrayBound] = None

    @property
    def is_unsized(self) -> bool:
        return self.bound is None

    def __str__(self) -> str:
        return f"[{self.bound}]" if self.bound is not None else '[]'


Suffix = Union[Pointer, Array]


@dataclass(frozen=True)
class TypeExpr:
    """A base type followed by pointer/array suffixes.

    Suffixes apply left to right: the first one wraps the base, so the
    last one is the outermost. `u8*[4]` is an array of four pointers to
    u8 and is represented as
    `TypeExpr(Primitive('u8'), (Pointer(), Array(LiteralBound('4'))))`.
    """
    base: Union[Primitive, Named]
    suffixes: Tuple[Suffix, ...] = ()

    def __str__(self) -> str:
        return str(self.base) + ''.join(str(s) for s in self.suffixes)

    @property
    def outermost(self) -> Optional[Suffix]:
        return self.suffixes[-1] if self.suffixes else None

    def element(self) -> 'TypeExpr':
        """The type with its outermost suffix removed."""
        if not self.suffixes:
            raise ValueError(f"{self} has no suffix to strip")
        return TypeExpr(self.base, self.suffixes[:-1])

    # Convenience constructors
    @staticmethod
    def primitive(name: str) -> 'TypeExpr':
        if name not in PRIMITIVE_NAMES:
            raise ValueError(f"unknown primitive type {name!r}")
        return TypeExpr(Primitive(name))

    @staticmethod
    def named(name: str) -> 'TypeExpr':
        return TypeExpr(Named(name))

    def pointer(self) -> 'TypeExpr':
        return TypeExpr(self.base, self.suffixes + (Pointer(),))

    def array(self, bound: Union[int, str, None] = None) -> 'TypeExpr':
        if bound is None:
            suffix = Array()
        elif isinstance(bound, int):
            suffix = Array(LiteralBound(str(bound)))
        else:
            suffix = Array(NamedBound(bound))
        return TypeExpr(self.base, self.suffixes + (suffix,))


@dataclass(frozen=True)
class Field:
    name: str
    ty: TypeExpr


@dataclass(frozen=True)
class Layout:
    """A named record type: an ordered list of typed fields.

    Bind a Layout in an environment under the record's name; `Named`
    bases referring to that name resolve to it. Fields are packed with no
    padding, so the size of a layout is the sum of its field sizes.

    The alignment of a layout is still the largest field alignment. It is
    the alignment the record asks for when a consumer places it, not a
    property of its packed storage: `size` never rounds up to it, so an
    array of `{u8, u32}` records is 5 bytes per element even though
    `align` reports 4.
    """
    fields: Tuple[Field, ...] = ()

    def __str__(self) -> str:
        inner = ', '.join(f"{f.name}: {f.ty}" for f in self.fields)
        return '{' + inner + '}'

    @staticmethod
    def of(*pairs: Tuple[str, TypeExpr]) -> 'Layout':
        return Layout(tuple(Field(name, ty) for name, ty in pairs))


@dataclass(frozen=True)
class LayoutParams:
    """Target machine facts used by `size` and `align`.

    `word_size` is the byte width of `uw`/`iw`; `pointer_size` is the
    byte width of pointers and `fn`. `byte_order` is informational and
    never affects size or alignment.
    """
    word_size: int = 8
    pointer_size: int = 8
    byte_order: str = field(default='little')

    def __post_init__(self):
        for name in ('word_size', 'pointer_size'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.byte_order not in ('little', 'big'):
            raise ValueError(f"byte_order must be 'little' or 'big', got {self.byte_order!r}")


def is_type_binding(binding: Any) -> bool:
    return isinstance(binding, (TypeExpr, Layout))


def type_name(value: Any) -> str:
    """Return the nil kind name of a binding."""
    # bool is a subclass of int; test it first
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Integer'
    if isinstance(value, TypeExpr):
        return 'Type'
    if isinstance(value, Layout):
        return 'Layout'
    return type(value).__name__


def in_range(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def to_string(value: Any) -> str:
    """Render a value or type the way nil source spells it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)
