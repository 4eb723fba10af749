"""
Per-class registry

Holds, for every native class type, the name it is exposed under, whether
its registration completed, and the store of callables generated for it.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TYPE_CHECKING

from .codegen import CodeGen, as_c_identifier, base_type

if TYPE_CHECKING:
    from .ir import ParamInfo
    from .state import TypeTag


@dataclass
class CallableWrapper:
    """A lua_CFunction produced for one native callable

    `emit` writes the function body; it captures everything it needs by
    value when the wrapper is synthesized.
    """
    c_name: str
    params: list['ParamInfo']
    return_type: str
    self_type: Optional[str]
    emit: Callable[[CodeGen, str], None]

    def generate(self, gen: CodeGen):
        self.emit(gen, self.c_name)


class SymbolTable:
    """C symbols defined in one translation unit"""

    def __init__(self):
        self._names: set[str] = set()

    def allocate(self, name: str) -> str:
        """Reserve name, or name_2, name_3, ... if it is taken"""
        symbol = name
        suffix = 2
        while symbol in self._names:
            symbol = f'{name}_{suffix}'
            suffix += 1
        self._names.add(symbol)
        return symbol

    def __contains__(self, name: str) -> bool:
        return name in self._names


class FunctionStore:
    """Shared collection of generated callables

    Every wrapper handed to a type tag is also kept here, including ones
    whose table entry was later overwritten. Stores emitted into the same
    file must share one SymbolTable.
    """

    def __init__(self, symbols: Optional[SymbolTable] = None):
        self.symbols = symbols if symbols is not None else SymbolTable()
        self._wrappers: list[CallableWrapper] = []

    def add(self, wrapper: CallableWrapper) -> CallableWrapper:
        """Take ownership of wrapper, renaming it if its C symbol is taken"""
        wrapper.c_name = self.symbols.allocate(wrapper.c_name)
        self._wrappers.append(wrapper)
        return wrapper

    def extend(self, other: 'FunctionStore'):
        """Take over wrappers already named from the same SymbolTable"""
        self._wrappers.extend(other)

    def generate(self, gen: CodeGen):
        for wrapper in self._wrappers:
            wrapper.generate(gen)

    def __iter__(self) -> Iterator[CallableWrapper]:
        return iter(self._wrappers)

    def __len__(self) -> int:
        return len(self._wrappers)


@dataclass
class ClassBinding:
    """Registration state of one native class"""
    type_name: str
    name: str = ''
    valid: bool = False
    functions: Optional[FunctionStore] = None
    type_tag: Optional['TypeTag'] = None
    constructor: tuple[str, ...] = ()
    module: str = ''         # Module whose file defines the helpers below
    copy_func: str = ''      # Copy-construct-in-place helper
    register_func: str = ''  # Fills the metatable inside luaopen

    @property
    def c_name(self) -> str:
        return as_c_identifier(self.type_name)

    @property
    def metatable(self) -> str:
        """Registry key of the class's metatable"""
        return self.type_tag.key if self.type_tag else ''


class ClassRegistry:
    """Native type name -> ClassBinding

    Records are created on first use and live as long as the registry;
    nothing here ever discards or re-creates one.
    """

    def __init__(self):
        self._bindings: dict[str, ClassBinding] = {}

    def binding(self, type_name: str) -> ClassBinding:
        """Get or create the record for a native type"""
        if type_name not in self._bindings:
            self._bindings[type_name] = ClassBinding(type_name=type_name)
        return self._bindings[type_name]

    def get(self, type_name: str) -> Optional[ClassBinding]:
        return self._bindings.get(type_name)

    def is_registered(self, type_name: str) -> bool:
        """True once registration of type_name has completed"""
        binding = self._bindings.get(type_name)
        return binding is not None and binding.valid

    def registered_name(self, type_name: str) -> str:
        """Name type_name is exposed under, or '' until registration completes"""
        binding = self._bindings.get(type_name)
        return binding.name if binding is not None and binding.valid else ''

    def find(self, type_str: str) -> Optional[ClassBinding]:
        """Resolve a spelling like `const Point &` to the binding of Point

        Only bindings whose registration committed a type tag are returned.
        """
        binding = self._bindings.get(base_type(type_str))
        if binding is None or binding.type_tag is None:
            return None
        return binding

    def registered(self) -> list[ClassBinding]:
        return [b for b in self._bindings.values() if b.valid]


REGISTRY = ClassRegistry()


def is_registered(type_name: str) -> bool:
    return REGISTRY.is_registered(type_name)


def registered_name(type_name: str) -> str:
    return REGISTRY.registered_name(type_name)
