from typing import Any, Dict, Iterator, Mapping, Optional, Union

from nil.errors import UnresolvedIdentifier
from nil.types import PRIMITIVE_NAMES, Layout, Primitive, TypeExpr

Binding = Union[int, bool, TypeExpr, Layout]


class Environment:
    """Maps identifiers to bindings: constant values or type descriptions.

    Lookups fall back to the parent environment. The evaluator only ever
    reads an environment, so one instance can be shared by any number of
    evaluations.
    """
    def __init__(self, values: Optional[Mapping[str, Binding]] = None,
                 parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Binding] = {}
        if values:
            for name, binding in values.items():
                self.define(name, binding)

    def define(self, name: str, binding: Binding) -> None:
        if not isinstance(binding, (int, TypeExpr, Layout)):
            raise TypeError(f"cannot bind {name} to {type(binding).__name__}; "
                            f"expected int, bool, TypeExpr or Layout")
        self.values[name] = binding

    def lookup(self, name: str) -> Optional[Binding]:
        """Return the binding for `name`, or None if it is unbound."""
        if name in self.values:
            return self.values[name]
        if self.parent is not None:
            return self.parent.lookup(name)
        return None

    def get(self, name: str) -> Binding:
        binding = self.lookup(name)
        if binding is None:
            raise UnresolvedIdentifier(name)
        return binding

    def child(self, values: Optional[Mapping[str, Binding]] = None) -> 'Environment':
        return Environment(values, parent=self)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __iter__(self) -> Iterator[str]:
        seen = set()
        env: Optional[Environment] = self
        while env is not None:
            for name in env.values:
                if name not in seen:
                    seen.add(name)
                    yield name
            env = env.parent


def builtin_environment() -> Environment:
    """The root scope: the boolean constants and the primitive types."""
    env = Environment({'true': True, 'false': False})
    for name in PRIMITIVE_NAMES:
        env.define(name, TypeExpr(Primitive(name)))
    return env


BUILTINS = builtin_environment()


def make_environment(values: Optional[Mapping[str, Any]] = None) -> Environment:
    """Create a caller environment whose parent is the builtin scope."""
    return Environment(values, parent=BUILTINS)


def resolve(env: Environment, name: str) -> Binding:
    """Look `name` up in `env`, then in the builtin scope."""
    binding = env.lookup(name)
    if binding is None:
        binding = BUILTINS.lookup(name)
    if binding is None:
        raise UnresolvedIdentifier(name)
    return binding
