from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from typing_extensions import TypeAlias

from .tree import BlockStatement, Identifier

# ---------- Value Model ----------

HashKey: TypeAlias = Tuple[str, object]

@dataclass(frozen=True)
class MkInteger:
    value: int

    def type_name(self) -> str:
        return "INTEGER"

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return ("INTEGER", self.value)

@dataclass(frozen=True)
class MkBoolean:
    value: bool

    def type_name(self) -> str:
        return "BOOLEAN"

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return ("BOOLEAN", self.value)

@dataclass(frozen=True)
class MkString:
    value: str

    def type_name(self) -> str:
        return "STRING"

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return ("STRING", self.value)

@dataclass(frozen=True)
class MkNull:
    def type_name(self) -> str:
        return "NULL"

    def inspect(self) -> str:
        return "null"

@dataclass(frozen=True)
class MkArray:
    elements: Tuple['MkValue', ...]

    def type_name(self) -> str:
        return "ARRAY"

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"

@dataclass(frozen=True)
class HashPair:
    key: 'MkValue'
    value: 'MkValue'

@dataclass(frozen=True, eq=False)
class MkHash:
    pairs: Mapping[HashKey, HashPair]

    def type_name(self) -> str:
        return "HASH"

    def inspect(self) -> str:
        items = [f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"

@dataclass(frozen=True, eq=False)
class MkFn:
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    env: 'Environment'  # captured at definition, shared by reference

    def type_name(self) -> str:
        return "FUNCTION"

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{...}}"

BuiltinFn = Callable[[List['MkValue']], 'MkValue']

@dataclass(frozen=True, eq=False)
class MkBuiltin:
    name: str
    fn: BuiltinFn
    arity: Optional[int] = None

    def type_name(self) -> str:
        return "BUILTIN"

    def inspect(self) -> str:
        return "builtin function"

@dataclass(frozen=True)
class MkError:
    message: str

    def type_name(self) -> str:
        return "ERROR"

    def inspect(self) -> str:
        return f"ERROR: {self.message}"

MkValue: TypeAlias = (
    MkInteger
    | MkBoolean
    | MkString
    | MkNull
    | MkArray
    | MkHash
    | MkFn
    | MkBuiltin
    | MkError
)

HashableValue: TypeAlias = MkInteger | MkBoolean | MkString

# Shared immutable singletons
NULL = MkNull()
TRUE = MkBoolean(True)
FALSE = MkBoolean(False)

def native_bool(value: bool) -> MkBoolean:
    return TRUE if value else FALSE

def new_hash(pairs: Dict[HashKey, HashPair]) -> MkHash:
    return MkHash(MappingProxyType(dict(pairs)))

# ---------- Environment ----------

class Environment:
    """One lexical scope. `outer` is shared with every closure that captured it."""

    def __init__(self, outer: Optional['Environment'] = None, builtins: Optional[Mapping[str, MkBuiltin]] = None):
        self.store: Dict[str, MkValue] = {}
        self.outer = outer

        if builtins is None and outer is None:
            from .runtime import builtin_table  # local import to avoid cycle
            builtins = builtin_table()
        self.builtins: Mapping[str, MkBuiltin] = builtins if builtins is not None else outer.builtins

    def get(self, name: str) -> Optional[MkValue]:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer

        return self.builtins.get(name)

    def set(self, name: str, value: MkValue) -> MkValue:
        self.store[name] = value
        return value

    def assign(self, name: str, value: MkValue) -> bool:
        """Rebind `name` in the nearest scope that already holds it."""
        env: Optional[Environment] = self

        while env is not None:
            if name in env.store:
                env.store[name] = value
                return True
            env = env.outer

        return False

    def new_enclosed(self) -> 'Environment':
        return Environment(outer=self)

# ---------- Exceptions ----------

class MonkeyError(Exception):
    """Base for interpreter-internal exceptions (never Monkey-level errors)."""

class ReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: MkValue):
        super().__init__()
        self.value = value

