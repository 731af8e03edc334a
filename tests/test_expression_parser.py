import pytest

from nil.ast import (
    Arith, BoolAnd, BoolOr, Compare, Ident, IntLiteral, Not, Operator, Ternary,
)
from nil.errors import LexError, ParseError
from nil.parser import parse_expression


def test_multiplication_binds_tighter():
    assert parse_expression('1 + 2 * 3') == Arith(
        '+', IntLiteral('1'), Arith('*', IntLiteral('2'), IntLiteral('3')))


def test_left_associative_subtraction():
    assert parse_expression('1 - 2 - 3') == Arith(
        '-', Arith('-', IntLiteral('1'), IntLiteral('2')), IntLiteral('3'))


def test_parentheses():
    assert parse_expression('(1 + 2) * 3') == Arith(
        '*', Arith('+', IntLiteral('1'), IntLiteral('2')), IntLiteral('3'))


def test_comparison_chain_is_flat():
    assert parse_expression('a < b <= c') == Compare(
        Ident('a'), (('<', Ident('b')), ('<=', Ident('c'))))


def test_or_binds_tighter_than_and():
    assert parse_expression('a and b or c') == BoolAnd(
        (Ident('a'), BoolOr((Ident('b'), Ident('c')))))


def test_and_binds_tighter_than_comparison():
    assert parse_expression('x == y and z') == Compare(
        Ident('x'), (('==', BoolAnd((Ident('y'), Ident('z')))),))


def test_not_is_counted():
    assert parse_expression('not not x') == Not(2, Ident('x'))
    assert parse_expression('not x + 1') == Not(1, Arith('+', Ident('x'), IntLiteral('1')))


def test_operator_call():
    assert parse_expression('len(foo)') == Operator('len', 'foo')
    assert parse_expression('size(a) * 2') == Arith('*', Operator('size', 'a'), IntLiteral('2'))


def test_ternary():
    assert parse_expression('if a then 1 else 2') == Ternary(
        Ident('a'), IntLiteral('1'), IntLiteral('2'))


def test_ternary_accepts_newlines_and_line_comments():
    expected = Ternary(Ident('a'), IntLiteral('1'), IntLiteral('2'))
    assert parse_expression('if a\nthen 1\nelse 2') == expected
    assert parse_expression('if // pick one\n a then\n 1 else // fallback\n 2') == expected


def test_nested_ternary_in_branch():
    assert parse_expression('if a then if b then 1 else 2 else 3') == Ternary(
        Ident('a'), Ternary(Ident('b'), IntLiteral('1'), IntLiteral('2')), IntLiteral('3'))


def test_keyword_prefixed_identifier():
    assert parse_expression('ifx') == Ident('ifx')


def test_spans():
    tree = parse_expression('1 + 22')
    assert tree.span == (0, 6)
    assert tree.right.span == (4, 6)


def test_parse_is_deterministic():
    source = 'if len(t) > 2 then size(t) / 2 else align(t)'
    assert parse_expression(source) == parse_expression(source)


def test_trailing_tokens_rejected():
    with pytest.raises(ParseError) as info:
        parse_expression('1 + 2 extra')
    assert info.value.position == 6


def test_newline_outside_ternary_rejected():
    with pytest.raises(ParseError):
        parse_expression('1 +\n2')


def test_operator_name_needs_parenthesis():
    with pytest.raises(ParseError) as info:
        parse_expression('len foo')
    assert info.value.expected == ("'('",)


def test_operator_name_alone_rejected():
    with pytest.raises(ParseError):
        parse_expression('size')


def test_missing_else():
    with pytest.raises(ParseError) as info:
        parse_expression('if a then 1')
    assert info.value.found == 'end of input'


def test_then_without_if():
    with pytest.raises(ParseError):
        parse_expression('a then 1 else 2')


def test_unbalanced_parenthesis():
    with pytest.raises(ParseError):
        parse_expression('(1 + 2')


def test_no_unary_minus():
    with pytest.raises(ParseError):
        parse_expression('-1')


def test_lex_error_surfaces():
    with pytest.raises(LexError):
        parse_expression('1 + ?')
