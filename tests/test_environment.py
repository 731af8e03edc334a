import pytest

from nil.environment import BUILTINS, Environment, make_environment, resolve
from nil.errors import UnresolvedIdentifier
from nil.parser import parse_type
from nil.types import Layout


def test_lookup_falls_back_to_parent():
    parent = Environment({'a': 1, 'b': 2})
    child = parent.child({'b': 3})
    assert child.get('a') == 1
    assert child.get('b') == 3
    assert parent.get('b') == 2


def test_unbound_name():
    env = Environment()
    assert env.lookup('x') is None
    assert 'x' not in env
    with pytest.raises(UnresolvedIdentifier) as info:
        env.get('x')
    assert info.value.ident == 'x'


def test_accepts_values_and_types():
    env = Environment()
    env.define('n', 4)
    env.define('flag', False)
    env.define('t', parse_type('u8*'))
    env.define('rec', Layout())
    assert 'flag' in env
    assert env.get('flag') is False


def test_rejects_other_bindings():
    env = Environment()
    with pytest.raises(TypeError):
        env.define('s', 'u8')


def test_builtins():
    assert BUILTINS.get('true') is True
    assert BUILTINS.get('false') is False
    assert BUILTINS.get('u32') == parse_type('u32')


def test_make_environment_inherits_builtins():
    env = make_environment({'n': 1})
    assert env.get('true') is True
    assert list(env)[0] == 'n'
    assert 'fn' in list(env)


def test_callers_can_shadow_builtins():
    env = make_environment({'uw': parse_type('u32')})
    assert resolve(env, 'uw') == parse_type('u32')


def test_resolve_without_builtin_parent():
    env = Environment({'n': 1})
    assert resolve(env, 'n') == 1
    assert resolve(env, 'false') is False
    with pytest.raises(UnresolvedIdentifier):
        resolve(env, 'missing')
