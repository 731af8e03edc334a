"""Expression tree definitions for nil constant expressions.

The node classes mirror the grammar rules: one node per precedence level
that actually combines operands. Nodes are immutable and carry the source
span they were parsed from; the span takes no part in equality, so two
parses of the same text compare equal regardless of where they came from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


Span = Optional[Tuple[int, int]]


@dataclass(frozen=True)
class Node:
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Ternary(Node):
    cond: Node
    then: Node
    else_: Node
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Compare(Node):
    """A comparison chain `first op1 a1 op2 a2 ...`.

    `rest` holds the (operator, operand) pairs in source order.
    """
    first: Node
    rest: Tuple[Tuple[str, Node], ...]
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BoolAnd(Node):
    operands: Tuple[Node, ...]
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BoolOr(Node):
    operands: Tuple[Node, ...]
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Not(Node):
    count: int  # number of `not` keywords
    inner: Node
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Arith(Node):
    op: str  # one of + - * / %
    left: Node
    right: Node
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Operator(Node):
    name: str  # len, size or align
    arg: str
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class IntLiteral(Node):
    text: str  # as written, e.g. '0x1_0'
    span: Span = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Ident(Node):
    name: str
    span: Span = field(default=None, compare=False, repr=False)
