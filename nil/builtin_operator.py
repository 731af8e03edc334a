from dataclasses import dataclass
from typing import Any

from nil.layout import align_of, length_of, size_of


@dataclass
class BuiltinOperator:
    name: str
    fn: Any  # called as fn(type_binding, env, params) -> int

    def __repr__(self) -> str:
        return f"<operator {self.name}>"


def _length(ty, env, params):
    return length_of(ty, env)


OPERATORS = {
    'len': BuiltinOperator('len', _length),
    'size': BuiltinOperator('size', size_of),
    'align': BuiltinOperator('align', align_of),
}
