"""
Class registration module

Registers one C++ class: its metatable, its `new` constructor and all of
its members, and generates the C++ that performs the registration inside
luaopen.
"""

from typing import Optional, Sequence, TYPE_CHECKING

from .codegen import CodeGen
from .errors import BindingError
from .factory import InstanceFactory
from .func import Marshaller
from .members import MemberBinder, MemberDescriptor, MutableField, ImmutableField, describe
from .registry import ClassBinding, ClassRegistry, FunctionStore, REGISTRY
from .types import TypeConverter

if TYPE_CHECKING:
    from .ir import ClassInfo
    from .state import LuaState


class ClassRegistrar:
    """Registers a class and generates its binding code"""

    def __init__(self, info: 'ClassInfo', registry: ClassRegistry = REGISTRY,
                 type_conv: Optional[TypeConverter] = None):
        self.info = info
        self.registry = registry
        self.type_conv = type_conv or TypeConverter(registry)
        self.marshaller = Marshaller(self.type_conv)
        self.binding = registry.binding(info.name)

    def register(self, state: 'LuaState', name: str, ctor_args: Sequence[str],
                 functions: FunctionStore, *members: MemberDescriptor) -> ClassBinding:
        """Expose the class to Lua as `name`

        ctor_args picks the one constructor reachable as `name.new(...)`.
        Members are bound in order; a later member with the same name
        replaces the earlier entry.
        """
        ctor = self.info.find_ctor(ctor_args)
        if ctor is None:
            raise BindingError(f'{self.info.name} has no constructor ({", ".join(ctor_args)})')

        binding = self.binding
        # Native spelling, two types can share one c_name
        key = f'{state.module}.{binding.type_name}' if state.module else binding.type_name
        tag = state.stage(key, name)
        staged = FunctionStore(functions.symbols)

        tag.set_self_index()
        factory = InstanceFactory(binding, self.marshaller)
        tag.set('new', staged.add(factory.constructor(ctor.params)))

        binder = MemberBinder(binding, self.marshaller, tag, staged)
        for member in members:
            binder.bind(member)

        # Every member bound, publish
        state.install(tag)
        functions.extend(staged)
        binding.name = name
        binding.module = state.module
        binding.functions = functions
        binding.type_tag = tag
        binding.constructor = ctor.signature
        binding.copy_func = functions.symbols.allocate(f'lpp_{binding.c_name}_copy')
        binding.register_func = functions.symbols.allocate(f'register_{binding.c_name}')
        binding.valid = True
        return binding

    def generate_copier(self, gen: CodeGen):
        """Generate the copy helper; must precede every wrapper that returns the class"""
        InstanceFactory(self.binding, self.marshaller).copier(gen)

    def generate(self, gen: CodeGen):
        """Generate all wrappers and the register function"""
        if not self.binding.valid:
            raise BindingError(f'{self.info.name} was not registered')
        self.binding.functions.generate(gen)
        self._gen_register(gen)

    def _gen_register(self, gen: CodeGen):
        tag = self.binding.type_tag
        with gen.block(f'static void {self.binding.register_func}(lua_State *L) {{'):
            gen.line(f'luaL_newmetatable(L, "{tag.key}");')

            if tag.self_index:
                # metatable.__index = metatable
                gen.line('lua_pushstring(L, "__index");')
                gen.line('lua_pushvalue(L, -2);')
                gen.line('lua_rawset(L, -3);')

            for key, wrapper in tag.entries.items():
                gen.line(f'lua_pushstring(L, "{key}");')
                gen.line(f'lua_pushcfunction(L, {wrapper.c_name});')
                gen.line('lua_rawset(L, -3);')

            gen.line('lua_pop(L, 1);')
        gen.line()


class ClassBuilder:
    """Collects the constructor and members of a class before registering it"""

    def __init__(self, info: 'ClassInfo'):
        self.info = info
        self._ctor: Optional[tuple[str, ...]] = None
        self._members: list[MemberDescriptor] = []

    def constructor(self, *arg_types: str) -> 'ClassBuilder':
        self._ctor = tuple(arg_types)
        return self

    def method(self, name: str, lua_name: Optional[str] = None) -> 'ClassBuilder':
        method = self.info.get_method(name)
        if method is None:
            raise BindingError(f'{self.info.name} has no method {name!r}')
        self._members.append(describe(lua_name or name, method))
        return self

    def field(self, name: str, lua_name: Optional[str] = None,
              writable: Optional[bool] = None) -> 'ClassBuilder':
        """Add a field; writable overrides what the declaration implies"""
        field = self.info.get_field(name)
        if field is None:
            raise BindingError(f'{self.info.name} has no field {name!r}')
        lua_name = lua_name or name
        if writable is None:
            self._members.append(describe(lua_name, field))
        elif writable:
            self._members.append(MutableField(lua_name, field))
        else:
            self._members.append(ImmutableField(lua_name, field))
        return self

    def member(self, name: str, lua_name: Optional[str] = None) -> 'ClassBuilder':
        """Add a field or method, whichever the class declares"""
        if self.info.get_field(name) is not None:
            return self.field(name, lua_name)
        return self.method(name, lua_name)

    def members(self) -> list[MemberDescriptor]:
        return list(self._members)

    def default_constructor(self) -> tuple[str, ...]:
        """First declared constructor, or the implicit default one"""
        if self.info.ctors:
            return tuple(p.type for p in self.info.ctors[0].params)
        return ()

    def register(self, state: 'LuaState', name: str, functions: FunctionStore,
                 registry: ClassRegistry = REGISTRY,
                 type_conv: Optional[TypeConverter] = None) -> ClassRegistrar:
        ctor = self._ctor if self._ctor is not None else self.default_constructor()
        registrar = ClassRegistrar(self.info, registry, type_conv)
        registrar.register(state, name, ctor, functions, *self._members)
        return registrar
