"""
Main generator module

Orchestrates all components to generate complete Lua bindings for the
classes of one C++ module.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from .ir import IR, ClassInfo
from .codegen import CodeGen, as_c_identifier, as_lua_name
from .errors import BindingError
from .registrar import ClassBuilder, ClassRegistrar
from .registry import ClassRegistry, FunctionStore, SymbolTable, REGISTRY
from .state import LuaState
from .types import TypeConverter, TypeHandler
from .luacats import LuaCATSGenerator


@dataclass
class ClassHandler:
    """Configuration for class binding generation"""
    lua_name: str = ''
    constructor: Optional[tuple[str, ...]] = None
    members: list[str] = field(default_factory=list)  # Empty: every field, then every method
    skip_members: list[str] = field(default_factory=list)
    renames: dict[str, str] = field(default_factory=dict)
    readonly: list[str] = field(default_factory=list)  # Fields exposed without a setter


class Generator:
    """Main binding generator"""

    def __init__(self, output_root: str, registry: ClassRegistry = REGISTRY):
        self.output_root = output_root
        self.registry = registry
        self.bindings_root = os.path.join(output_root, 'gen/bindings')
        self.types_root = os.path.join(output_root, 'gen/types')
        self._handlers: dict[str, ClassHandler] = {}
        self._type_handlers: dict[str, TypeHandler] = {}
        self._ignores: set[str] = set()

    def ignore(self, *type_names: str):
        """Skip these classes entirely"""
        self._ignores.update(type_names)

    def class_handler(self, type_name: str) -> ClassHandler:
        """Get or create class configuration"""
        if type_name not in self._handlers:
            self._handlers[type_name] = ClassHandler()
        return self._handlers[type_name]

    def type_handler(self, type_name: str):
        """Decorator to register a type handler"""
        def decorator(cls):
            self._type_handlers[type_name] = cls()
            return cls
        return decorator

    def prepare(self):
        """Prepare output directories"""
        print('=== Generating class bindings:')
        os.makedirs(self.bindings_root, exist_ok=True)
        os.makedirs(self.types_root, exist_ok=True)

    def generate_all(self, ir_paths: list[str]) -> list[tuple[str, str]]:
        """Generate bindings for every IR file"""
        self.prepare()
        return [self.generate_module(path) for path in ir_paths]

    def generate_module(self, ir_path: str) -> tuple[str, str]:
        """Generate bindings for the module described by an IR file"""
        ir = IR.load(ir_path)
        print(f'  {ir_path} => {ir.module}')
        return self.generate(ir)

    def generate(self, ir: IR) -> tuple[str, str]:
        """Write <module>.cpp and <module>.lua, return their paths"""
        if not ir.module:
            raise BindingError('IR has no module name')
        os.makedirs(self.bindings_root, exist_ok=True)
        os.makedirs(self.types_root, exist_ok=True)

        c_code, luacats = self.generate_code(ir)

        c_output = os.path.join(self.bindings_root, f'{ir.module}.cpp')
        with open(c_output, 'w', newline='\n') as f:
            f.write(c_code)

        types_output = os.path.join(self.types_root, f'{ir.module}.lua')
        with open(types_output, 'w', newline='\n') as f:
            f.write(luacats)

        return c_output, types_output

    def generate_code(self, ir: IR) -> tuple[str, str]:
        """Generate C++ binding code and LuaCATS definitions"""
        state = LuaState(ir.module)
        type_conv = TypeConverter(self.registry, ir.module)
        for type_name, handler in self._type_handlers.items():
            type_conv.register(type_name, handler)

        for type_name in self._handlers:
            if type_name not in ir.classes:
                print(f'  >> warning: no class {type_name} in {ir.module}, handler unused')

        # One file, so one set of C symbols for every class
        symbols = SymbolTable()
        registrars = []
        for info in ir.classes.values():
            if info.name in self._ignores:
                continue
            handler = self._handlers.get(info.name, ClassHandler())
            builder = self._builder(info, handler)
            lua_name = handler.lua_name or as_lua_name(info.name)
            registrars.append(builder.register(state, lua_name, FunctionStore(symbols),
                                               self.registry, type_conv))

        gen = CodeGen()
        self._gen_prologue(ir, gen)

        # Copy helpers first, any wrapper may return any class by value
        for registrar in registrars:
            registrar.generate_copier(gen)

        for registrar in registrars:
            registrar.generate(gen)

        self._gen_luaopen(ir.module, state, registrars, gen)

        luacats = LuaCATSGenerator(state, type_conv).generate()
        return gen.output(), luacats

    def _builder(self, info: ClassInfo, handler: ClassHandler) -> ClassBuilder:
        builder = ClassBuilder(info)
        if handler.constructor is not None:
            builder.constructor(*handler.constructor)

        if handler.members:
            names = handler.members
        else:
            names = [f.name for f in info.fields]
            method_names = [m.name for m in info.methods]
            for name in dict.fromkeys(method_names):
                if method_names.count(name) > 1:
                    print(f'  >> warning: skipping overloaded {info.name}::{name}')
                    continue
                names.append(name)

        for name in names:
            if name in handler.skip_members:
                continue
            lua_name = handler.renames.get(name)
            if name in handler.readonly:
                builder.field(name, lua_name, writable=False)
            else:
                builder.member(name, lua_name)
        return builder

    def _gen_prologue(self, ir: IR, gen: CodeGen):
        gen.line('/* machine generated, do not edit */')
        gen.line('#include <lua.hpp>')
        gen.line('#include <new>')
        gen.line('#include <string>')
        gen.line()

        for header in ir.headers:
            gen.line(f'#include "{header}"')
        if ir.headers:
            gen.line()

        # CLASS_BINDING_API macro
        gen.line('#ifndef CLASS_BINDING_API')
        gen.line('  #ifdef _WIN32')
        gen.line('    #define CLASS_BINDING_API __declspec(dllexport)')
        gen.line('  #else')
        gen.line('    #define CLASS_BINDING_API')
        gen.line('  #endif')
        gen.line('#endif')
        gen.line()

    def _gen_luaopen(self, module_name: str, state: LuaState,
                     registrars: list[ClassRegistrar], gen: CodeGen):
        """Generate luaopen function"""
        with gen.block(f'extern "C" CLASS_BINDING_API int luaopen_{as_c_identifier(module_name)}(lua_State *L) {{'):
            gen.line('lua_newtable(L);')
            for registrar in registrars:
                gen.line(f'{registrar.binding.register_func}(L);')

            # Export metatables so scripts can call Class.new(...)
            for name, tag in state.exports.items():
                gen.line(f'luaL_getmetatable(L, "{tag.key}");')
                gen.line(f'lua_setfield(L, -2, "{name}");')

            gen.line('return 1;')
