# nil language package
# Parses and evaluates nil constant expressions and type expressions.
from .evaluator import parse_and_eval, Evaluator
from .parser import parse_expression, parse_type, tokenize, Token
from .environment import Environment, make_environment
from .layout import size_of, align_of, length_of
from .types import TypeExpr, Layout, Field, LayoutParams
from .errors import (
    NilError, LexError, ParseError, UnresolvedIdentifier, NilTypeError,
    DivisionByZero, NilOverflowError, UnsizedTypeError,
)

__all__ = [
    'parse_and_eval',
    'parse_expression',
    'parse_type',
    'tokenize',
    'Token',
    'Evaluator',
    'Environment',
    'make_environment',
    'size_of',
    'align_of',
    'length_of',
    'TypeExpr',
    'Layout',
    'Field',
    'LayoutParams',
    'NilError',
    'LexError',
    'ParseError',
    'UnresolvedIdentifier',
    'NilTypeError',
    'DivisionByZero',
    'NilOverflowError',
    'UnsizedTypeError',
]
