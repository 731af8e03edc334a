"""Parser for the nil constant-expression and type language.

A single Lark grammar describes both sublanguages and is compiled once
with two start symbols:

* ``nil``: one constant expression spanning the whole input, and
* ``ty``: one type expression spanning the whole input.

The grammar's terminals double as the lexer. Keywords and operator names
are regex terminals with a negative lookahead on identifier characters, so
``ifx`` is an identifier rather than ``if`` followed by ``x``. Newlines and
``//`` comments are real tokens (the grammar accepts them at a few places
inside ``if``/``then``/``else``); spaces, tabs and ``/* */`` comments are
ignored.

Lark errors are converted into `LexError` and `ParseError` with the Lark
exception chained as the cause. The parse tree is turned into the
expression tree of `nil.ast` (or a `TypeExpr`) by `ASTTransformer`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from lark import Lark, Transformer, v_args
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from .ast import (
    Node, Ternary, Compare, BoolAnd, BoolOr, Not, Arith, Operator,
    IntLiteral, Ident,
)
from .errors import LexError, ParseError
from .types import (
    PRIMITIVE_NAMES, Primitive, Named, Pointer, Array, LiteralBound,
    NamedBound, TypeExpr,
)

logger = logging.getLogger(__name__)


NIL_GRAMMAR = r"""
    nil: const_expr
    ty: IDENT suffix*

    // Constant expressions, loosest binding first
    ?const_expr: ternary
               | cmp

    ternary: IF [NEWLINE] const_expr [NEWLINE] THEN [NEWLINE] const_expr [NEWLINE] ELSE [NEWLINE] const_expr

    ?cmp: and_expr (CMP_OP and_expr)*
    ?and_expr: or_expr (AND or_expr)*
    ?or_expr: not_expr (OR not_expr)*
    ?not_expr: NOT+ add_expr -> negation
             | add_expr
    ?add_expr: mul_expr (ADD_OP mul_expr)*
    ?mul_expr: term ((STAR | MUL_OP) term)*

    ?term: "(" const_expr ")"
         | OPERATOR_NAME "(" IDENT ")" -> operator
         | INTEGER -> int_literal
         | IDENT -> ident

    // Type suffixes
    ?suffix: STAR -> pointer
           | "[" "]" -> unsized
           | "[" bound ("," bound)* [","] "]" -> sized
    ?bound: INTEGER | IDENT

    // Tokens
    IF.2: /if(?![A-Za-z0-9_@#])/
    THEN.2: /then(?![A-Za-z0-9_@#])/
    ELSE.2: /else(?![A-Za-z0-9_@#])/
    AND.2: /and(?![A-Za-z0-9_@#])/
    OR.2: /or(?![A-Za-z0-9_@#])/
    NOT.2: /not(?![A-Za-z0-9_@#])/
    OPERATOR_NAME.2: /(?:len|size|align)(?![A-Za-z0-9_@#])/

    IDENT: /[A-Za-z_@#][A-Za-z0-9_@#]*/
    INTEGER: /0b[01][01_]*|0o[0-7][0-7_]*|0x[0-9A-Fa-f][0-9A-Fa-f_]*|[0-9][0-9_]*/

    CMP_OP: /==|!=|<=|>=|<|>/
    ADD_OP: /[+-]/
    MUL_OP: /[\/%]/
    STAR: "*"

    // A line comment stands in for the newline that ends it
    NEWLINE.3: /\/\/[^\n]*\n?|\n/

    BLOCK_COMMENT.3: /\/\*[\s\S]*?(?:\*\/|\Z)/
    WS: /[ \t\r]+/
    %ignore WS
    %ignore BLOCK_COMMENT
"""


def _check_block_comment(token: LarkToken) -> LarkToken:
    # The comment terminal also matches a `/*` that runs off the end of
    # the input so that it can be reported here instead of as `/` `*`.
    if len(token) < 4 or not token.endswith('*/'):
        raise LexError(token.start_pos, '/', f"unterminated block comment at offset {token.start_pos}")
    return token


NIL_PARSER = Lark(
    NIL_GRAMMAR,
    start=['nil', 'ty'],
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=False,
    lexer_callbacks={'BLOCK_COMMENT': _check_block_comment},
)
logger.debug("compiled nil grammar")


TERMINAL_NAMES = {
    'LPAR': "'('",
    'RPAR': "')'",
    'LSQB': "'['",
    'RSQB': "']'",
    'COMMA': "','",
    'STAR': "'*'",
    'IF': "'if'",
    'THEN': "'then'",
    'ELSE': "'else'",
    'AND': "'and'",
    'OR': "'or'",
    'NOT': "'not'",
    'OPERATOR_NAME': 'operator name',
    'IDENT': 'identifier',
    'INTEGER': 'integer literal',
    'CMP_OP': 'comparison operator',
    'ADD_OP': "'+' or '-'",
    'MUL_OP': "'/' or '%'",
    'NEWLINE': 'newline',
    '$END': 'end of input',
}


def describe_terminal(name: str) -> str:
    return TERMINAL_NAMES.get(name, name)


@dataclass(frozen=True)
class Token:
    """A lexed token. `span` is the (start, end) offset range in the source."""
    type: str
    value: str
    span: Tuple[int, int]
    line: int
    column: int

    @property
    def radix(self) -> int:
        if self.type != 'INTEGER':
            raise ValueError(f"{self.type} token has no radix")
        return literal_radix(self.value)


def literal_radix(text: str) -> int:
    prefix = text[:2]
    if prefix == '0b':
        return 2
    if prefix == '0o':
        return 8
    if prefix == '0x':
        return 16
    return 10


def literal_value(text: str) -> int:
    """Convert integer literal text (prefix and `_` separators included) to an int."""
    radix = literal_radix(text)
    digits = text[2:] if radix != 10 else text
    return int(digits.replace('_', ''), radix)


def tokenize(source: str) -> Iterator[Token]:
    """Lazily yield the tokens of `source`, skipping whitespace and block comments."""
    try:
        for tok in NIL_PARSER.lex(source):
            yield Token(tok.type, str(tok), (tok.start_pos, tok.end_pos), tok.line, tok.column)
    except UnexpectedCharacters as e:
        raise LexError(e.pos_in_stream, source[e.pos_in_stream]) from e


def _span(meta) -> Tuple[int, int]:
    return (meta.start_pos, meta.end_pos)


def _token_span(token: LarkToken) -> Tuple[int, int]:
    return (token.start_pos, token.end_pos)


def _nodes(items: Iterable) -> List[Node]:
    return [item for item in items if isinstance(item, Node)]


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into expression nodes and types."""

    def nil(self, items):
        return items[0]

    @v_args(meta=True)
    def ternary(self, meta, items):
        # items also holds the keyword and optional newline tokens
        cond, then, else_ = _nodes(items)
        return Ternary(cond, then, else_, span=_span(meta))

    @v_args(meta=True)
    def cmp(self, meta, items):
        rest = []
        i = 1
        while i < len(items):
            rest.append((str(items[i]), items[i + 1]))
            i += 2
        return Compare(items[0], tuple(rest), span=_span(meta))

    @v_args(meta=True)
    def and_expr(self, meta, items):
        return BoolAnd(tuple(_nodes(items)), span=_span(meta))

    @v_args(meta=True)
    def or_expr(self, meta, items):
        return BoolOr(tuple(_nodes(items)), span=_span(meta))

    @v_args(meta=True)
    def negation(self, meta, items):
        count = len(items) - 1
        return Not(count, items[-1], span=_span(meta))

    def binary_expr(self, items):
        # items pattern: expr (op expr)*, folded left-associatively
        left = items[0]
        i = 1
        while i < len(items):
            op = str(items[i])
            right = items[i + 1]
            left = Arith(op, left, right, span=(left.span[0], right.span[1]))
            i += 2
        return left

    def add_expr(self, items):
        return self.binary_expr(items)

    def mul_expr(self, items):
        return self.binary_expr(items)

    @v_args(meta=True)
    def operator(self, meta, items):
        name, arg = items
        return Operator(str(name), str(arg), span=_span(meta))

    def int_literal(self, items):
        token = items[0]
        return IntLiteral(str(token), span=_token_span(token))

    def ident(self, items):
        token = items[0]
        return Ident(str(token), span=_token_span(token))

    # Types
    def ty(self, items):
        name = str(items[0])
        base = Primitive(name) if name in PRIMITIVE_NAMES else Named(name)
        suffixes: List = []
        for group in items[1:]:
            suffixes.extend(group)
        return TypeExpr(base, tuple(suffixes))

    def pointer(self, items):
        return (Pointer(),)

    def unsized(self, items):
        return (Array(),)

    def sized(self, items):
        # `[a, b]` lists dimensions outermost first; suffixes wrap
        # innermost first, so it becomes `[b][a]`.
        bounds = []
        for token in items:
            if token.type == 'INTEGER':
                bounds.append(LiteralBound(str(token)))
            else:
                bounds.append(NamedBound(str(token)))
        return tuple(Array(bound) for bound in reversed(bounds))


def _parse(source: str, start: str):
    try:
        return NIL_PARSER.parse(source, start=start)
    except UnexpectedCharacters as e:
        raise LexError(e.pos_in_stream, source[e.pos_in_stream]) from e
    except UnexpectedToken as e:
        token = e.token
        expected = [describe_terminal(name) for name in e.expected]
        if token.type == '$END':
            raise ParseError(len(source), expected, 'end of input') from e
        found = f"{describe_terminal(token.type)} {str(token)!r}"
        raise ParseError(token.start_pos, expected, found) from e
    except UnexpectedEOF as e:
        expected = [describe_terminal(name) for name in e.expected]
        raise ParseError(len(source), expected, 'end of input') from e


def parse_expression(source: str) -> Node:
    """Parse `source` as exactly one constant expression.

    Leftover tokens after a complete expression are a ParseError.
    """
    tree = _parse(source, 'nil')
    return ASTTransformer().transform(tree)


def parse_type(source: str) -> TypeExpr:
    """Parse `source` as exactly one type expression, e.g. ``u8*[4]``."""
    tree = _parse(source, 'ty')
    return ASTTransformer().transform(tree)
