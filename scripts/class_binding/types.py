"""
Type conversion module

Provides Lua <-> C++ type conversion code generation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .codegen import (
    is_int_type, is_float_type, is_string_ptr, is_std_string, is_void_ptr,
    is_pointer, is_reference, normalize_type, strip_ref, value_type, base_type,
)
from .errors import BindingError
from .registry import ClassRegistry, ClassBinding, REGISTRY


@dataclass
class ConversionContext:
    """Context for type conversion code generation"""
    idx: int              # Lua stack index
    var: str              # C++ variable name
    type: str             # C++ type
    metatable: str = ''   # Metatable key (for registered classes)
    registry: Optional[ClassRegistry] = None


class TypeHandler(ABC):
    """Base class for custom type handlers"""

    @abstractmethod
    def lua_to_cpp(self, ctx: ConversionContext) -> str:
        """Generate code to convert Lua value to C++ value"""
        pass

    @abstractmethod
    def cpp_to_lua(self, ctx: ConversionContext) -> str:
        """Generate code to push C++ value to Lua stack"""
        pass

    @abstractmethod
    def luacats_type(self) -> str:
        """Return LuaCATS type annotation"""
        pass


class TypeConverter:
    """Manages type conversion between Lua and C++

    Generated snippets may span several lines; callers emit them line by line.
    """

    def __init__(self, registry: ClassRegistry = REGISTRY, module: str = ''):
        self.registry = registry
        self.module = module
        self._handlers: dict[str, TypeHandler] = {}

    def register(self, type_name: str, handler: TypeHandler):
        """Register a custom type handler"""
        self._handlers[type_name] = handler

    def has_handler(self, type_name: str) -> bool:
        """Check if a custom handler exists for this type"""
        return type_name in self._handlers

    def lua_to_cpp(self, type_str: str, idx: int, var: str) -> str:
        """Generate code to get C++ value from Lua stack"""
        handler = self._handlers.get(base_type(type_str))
        if handler:
            ctx = self._context(type_str, idx, var)
            return handler.lua_to_cpp(ctx)

        return self._default_lua_to_cpp(type_str, idx, var)

    def cpp_to_lua(self, type_str: str, var: str) -> str:
        """Generate code to push C++ value to Lua stack"""
        handler = self._handlers.get(base_type(type_str))
        if handler:
            ctx = self._context(type_str, 0, var)
            return handler.cpp_to_lua(ctx)

        return self._default_cpp_to_lua(type_str, var)

    def luacats_type(self, type_str: str) -> str:
        """Get LuaCATS type for C++ type"""
        handler = self._handlers.get(base_type(type_str))
        if handler:
            return handler.luacats_type()

        return self._default_luacats_type(type_str)

    def _context(self, type_str: str, idx: int, var: str) -> ConversionContext:
        binding = self.registry.find(type_str)
        return ConversionContext(idx=idx, var=var, type=type_str,
                                 metatable=binding.metatable if binding else '',
                                 registry=self.registry)

    def _class_binding(self, type_str: str) -> Optional[ClassBinding]:
        binding = self.registry.find(type_str)
        if binding is not None and self.module and binding.module != self.module:
            # Its copy helper is static to the other module's file
            raise BindingError(f'{type_str!r} is bound by module {binding.module!r}, '
                               f'not {self.module!r}')
        return binding

    def _default_lua_to_cpp(self, type_str: str, idx: int, var: str) -> str:
        """Default Lua -> C++ conversion"""
        vtype = value_type(type_str)
        binding = self._class_binding(type_str)

        if binding is not None:
            ptr = normalize_type(strip_ref(type_str))
            if not is_pointer(type_str):
                ptr += '*'
            check = f'({ptr})luaL_checkudata(L, {idx}, "{binding.metatable}")'
            if is_pointer(type_str):
                return f'{ptr} {var} = {check};'
            elif is_reference(type_str):
                return f'{strip_ref(type_str)}& {var} = *{check};'
            return f'{vtype} {var} = *{check};'

        elif vtype == 'bool':
            return f'bool {var} = lua_toboolean(L, {idx});'

        elif is_int_type(vtype):
            return f'{vtype} {var} = ({vtype})luaL_checkinteger(L, {idx});'

        elif is_float_type(vtype):
            return f'{vtype} {var} = ({vtype})luaL_checknumber(L, {idx});'

        elif is_string_ptr(type_str):
            return f'const char* {var} = luaL_checkstring(L, {idx});'

        elif is_std_string(type_str):
            return f'std::string {var} = luaL_checkstring(L, {idx});'

        elif is_void_ptr(type_str):
            return f'{normalize_type(type_str)} {var} = lua_touserdata(L, {idx});'

        raise BindingError(f'cannot read a {type_str!r} from Lua')

    def _default_cpp_to_lua(self, type_str: str, var: str) -> str:
        """Default C++ -> Lua conversion"""
        vtype = value_type(type_str)
        if vtype == 'void':
            return ''

        binding = self._class_binding(type_str)
        if binding is not None:
            source = f'*{var}' if is_pointer(type_str) else var
            push = (f'void* ud = lua_newuserdatauv(L, sizeof({binding.type_name}), 0);\n'
                    f'{binding.copy_func}(ud, {source});\n'
                    f'luaL_setmetatable(L, "{binding.metatable}");')
            if is_pointer(type_str):
                # Pointers are copied too, a null one becomes nil
                indented = '\n'.join('    ' + text for text in push.splitlines())
                return (f'if ({var} == nullptr) {{\n'
                        f'    lua_pushnil(L);\n'
                        f'}} else {{\n'
                        f'{indented}\n'
                        f'}}')
            return push

        elif vtype == 'bool':
            return f'lua_pushboolean(L, {var});'

        elif is_int_type(vtype):
            return f'lua_pushinteger(L, (lua_Integer){var});'

        elif is_float_type(vtype):
            return f'lua_pushnumber(L, (lua_Number){var});'

        elif is_string_ptr(type_str):
            return f'lua_pushstring(L, {var});'

        elif is_std_string(type_str):
            return f'lua_pushlstring(L, {var}.data(), {var}.size());'

        elif is_void_ptr(type_str):
            return f'lua_pushlightuserdata(L, (void*){var});'

        raise BindingError(f'cannot push a {type_str!r} to Lua')

    def _default_luacats_type(self, type_str: str) -> str:
        """Default LuaCATS type conversion"""
        vtype = value_type(type_str)
        binding = self._class_binding(type_str)
        if binding is not None:
            name = binding.type_tag.name
            return f'{self.module}.{name}' if self.module else name
        elif vtype == 'void':
            return 'nil'
        elif vtype == 'bool':
            return 'boolean'
        elif is_int_type(vtype):
            return 'integer'
        elif is_float_type(vtype):
            return 'number'
        elif is_string_ptr(type_str) or is_std_string(type_str):
            return 'string'
        elif is_void_ptr(type_str):
            return 'lightuserdata?'
        return 'any'
