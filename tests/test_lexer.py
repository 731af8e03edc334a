import pytest

from nil.errors import LexError
from nil.parser import tokenize


def types(source):
    return [tok.type for tok in tokenize(source)]


def test_ternary_keywords():
    assert types('if x then 1 else 2') == ['IF', 'IDENT', 'THEN', 'INTEGER', 'ELSE', 'INTEGER']


def test_keyword_prefix_is_identifier():
    toks = list(tokenize('ifx not_a lenx orange'))
    assert [t.type for t in toks] == ['IDENT', 'IDENT', 'IDENT', 'IDENT']
    assert [t.value for t in toks] == ['ifx', 'not_a', 'lenx', 'orange']


def test_identifier_characters():
    toks = list(tokenize('@raw #count _x9'))
    assert [t.value for t in toks] == ['@raw', '#count', '_x9']


def test_operator_names():
    assert types('len size align') == ['OPERATOR_NAME', 'OPERATOR_NAME', 'OPERATOR_NAME']


def test_integer_literals_keep_text_and_radix():
    toks = list(tokenize('0x1_F 0b1010 0o17 1_000'))
    assert [t.value for t in toks] == ['0x1_F', '0b1010', '0o17', '1_000']
    assert [t.radix for t in toks] == [16, 2, 8, 10]


def test_comparison_operators_longest_match():
    toks = list(tokenize('<= < >= > == !='))
    assert [t.value for t in toks] == ['<=', '<', '>=', '>', '==', '!=']
    assert all(t.type == 'CMP_OP' for t in toks)


def test_block_comment_is_skipped():
    assert types('1 /* not * here */ + 2') == ['INTEGER', 'ADD_OP', 'INTEGER']


def test_newline_and_line_comment_are_tokens():
    toks = list(tokenize('a // note\nb\nc'))
    assert [t.type for t in toks] == ['IDENT', 'NEWLINE', 'IDENT', 'NEWLINE', 'IDENT']
    assert toks[1].value == '// note\n'


def test_spans():
    toks = list(tokenize('a + bc'))
    assert [t.span for t in toks] == [(0, 1), (2, 3), (4, 6)]


def test_unexpected_character():
    with pytest.raises(LexError) as info:
        list(tokenize('1 $ 2'))
    assert info.value.position == 2
    assert info.value.char == '$'


def test_unterminated_block_comment():
    with pytest.raises(LexError) as info:
        list(tokenize('1 /* open'))
    assert info.value.position == 2


def test_tokenize_is_lazy():
    tokens = tokenize('1 $')
    first = next(tokens)
    assert first.type == 'INTEGER'
    with pytest.raises(LexError):
        next(tokens)
