"""Byte size, alignment and array length of nil types.

Sizes follow a fixed target model: fixed-width primitives have their
natural width, `uw`/`iw` take the word size and `fn` and every pointer take
the pointer size from `LayoutParams`. A fixed array is its element size
times its bound. Record layouts are packed, so their size is the sum of
their field sizes and their alignment is the largest field alignment;
the size is never rounded up to that alignment.

Named types are looked up in the environment. A pointer never looks at its
pointee, so a record may point to itself; a name whose definition needs
its own size raises `NilTypeError`.
"""

from __future__ import annotations

from typing import FrozenSet, Union

from .environment import Environment, resolve
from .errors import NilOverflowError, NilTypeError, UnsizedTypeError
from .parser import literal_value
from .types import (
    Array, Layout, LayoutParams, LiteralBound, Named, Pointer, Primitive,
    TypeExpr, in_range, is_type_binding, type_name,
)


PRIMITIVE_SIZES = {
    'u8': 1, 'i8': 1,
    'u16': 2, 'i16': 2,
    'u32': 4, 'i32': 4, 'f32': 4,
    'u64': 8, 'i64': 8, 'f64': 8,
}

TypeBinding = Union[TypeExpr, Layout]


def primitive_size(name: str, params: LayoutParams) -> int:
    if name in ('uw', 'iw'):
        return params.word_size
    if name == 'fn':
        return params.pointer_size
    return PRIMITIVE_SIZES[name]


def resolve_named(name: str, env: Environment, seen: FrozenSet[str]) -> TypeBinding:
    if name in seen:
        raise NilTypeError(f"type {name}", 'non-recursive type', 'recursive definition')
    binding = resolve(env, name)
    if not is_type_binding(binding):
        raise NilTypeError(f"type {name}", 'Type', type_name(binding))
    return binding


def bound_value(array: Array, env: Environment) -> int:
    """The element count of a fixed array suffix."""
    bound = array.bound
    if isinstance(bound, LiteralBound):
        return literal_value(bound.text)
    value = resolve(env, bound.name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise NilTypeError(f"array bound {bound.name}", 'Integer', type_name(value))
    if value < 0:
        raise NilTypeError(f"array bound {bound.name}", 'non-negative Integer', str(value))
    if not in_range(value):
        raise NilOverflowError('array bound', (bound.name,))
    return value


def size_of(ty: TypeBinding, env: Environment, params: LayoutParams,
            seen: FrozenSet[str] = frozenset()) -> int:
    if isinstance(ty, Layout):
        return sum(size_of(f.ty, env, params, seen) for f in ty.fields)
    outer = ty.outermost
    if outer is None:
        base = ty.base
        if isinstance(base, Primitive):
            return primitive_size(base.name, params)
        target = resolve_named(base.name, env, seen)
        return size_of(target, env, params, seen | {base.name})
    if isinstance(outer, Pointer):
        return params.pointer_size
    if outer.is_unsized:
        raise UnsizedTypeError(ty, 'size')
    return bound_value(outer, env) * size_of(ty.element(), env, params, seen)


def align_of(ty: TypeBinding, env: Environment, params: LayoutParams,
             seen: FrozenSet[str] = frozenset()) -> int:
    if isinstance(ty, Layout):
        return max((align_of(f.ty, env, params, seen) for f in ty.fields), default=1)
    outer = ty.outermost
    if outer is None:
        base = ty.base
        if isinstance(base, Primitive):
            return primitive_size(base.name, params)
        target = resolve_named(base.name, env, seen)
        return align_of(target, env, params, seen | {base.name})
    if isinstance(outer, Pointer):
        return params.pointer_size
    if outer.is_unsized:
        raise UnsizedTypeError(ty, 'align')
    return align_of(ty.element(), env, params, seen)


def length_of(ty: TypeBinding, env: Environment,
              seen: FrozenSet[str] = frozenset()) -> int:
    """The bound of the outermost array suffix."""
    if isinstance(ty, Layout):
        raise NilTypeError('len', 'array type', 'Layout')
    outer = ty.outermost
    if outer is None and isinstance(ty.base, Named):
        target = resolve_named(ty.base.name, env, seen)
        return length_of(target, env, seen | {ty.base.name})
    if not isinstance(outer, Array):
        raise NilTypeError('len', 'array type', str(ty))
    if outer.is_unsized:
        raise UnsizedTypeError(ty, 'len')
    return bound_value(outer, env)
