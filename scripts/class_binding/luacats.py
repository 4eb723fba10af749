"""
LuaCATS type definition generation module

Generates .lua files with type annotations for IDE autocompletion.
"""

from typing import TYPE_CHECKING

from .codegen import LUA_KEYWORDS, value_type

if TYPE_CHECKING:
    from .registry import CallableWrapper
    from .state import LuaState, TypeTag
    from .types import TypeConverter


class LuaCATSGenerator:
    """Generates LuaCATS type definition files"""

    def __init__(self, state: 'LuaState', type_conv: 'TypeConverter'):
        self.state = state
        self.type_conv = type_conv
        self.module_name = state.module

    def generate(self) -> str:
        """Generate complete LuaCATS type definition file"""
        lines = []
        lines.append('---@meta')
        lines.append(f'-- LuaCATS type definitions for {self.module_name}')
        lines.append('-- Auto-generated, do not edit')
        lines.append('')

        exports = self.state.exports
        for name, tag in exports.items():
            lines.extend(self._gen_class(name, tag))

        # Module table holding every exported class
        lines.append(f'---@class {self.module_name}')
        for name in exports:
            lines.append(f'---@field {name} {self._class_type(name)}')
        lines.append(f'local {self.module_name} = {{}}')
        lines.append('')
        lines.append(f'return {self.module_name}')
        return '\n'.join(lines)

    def _class_type(self, name: str) -> str:
        return f'{self.module_name}.{name}' if self.module_name else name

    def _gen_class(self, name: str, tag: 'TypeTag') -> list[str]:
        lines = []
        lines.append(f'---@class {self._class_type(name)}')
        lines.append(f'local {name} = {{}}')
        lines.append('')

        for key, wrapper in tag.entries.items():
            lines.extend(self._gen_entry(name, key, wrapper))
            lines.append('')

        return lines

    def _gen_entry(self, class_name: str, key: str, wrapper: 'CallableWrapper') -> list[str]:
        lines = []
        param_names = []

        if wrapper.self_type is not None:
            lines.append(f'---@param self {self._class_type(class_name)}')
            param_names.append('self')

        for param in wrapper.params:
            # Parameter names that are Lua keywords get a trailing underscore
            lua_name = f'{param.name}_' if param.name in LUA_KEYWORDS else param.name
            lua_type = self.type_conv.luacats_type(param.type)
            lines.append(f'---@param {lua_name} {lua_type}')
            param_names.append(lua_name)

        if value_type(wrapper.return_type) != 'void':
            lua_ret = self.type_conv.luacats_type(wrapper.return_type)
            lines.append(f'---@return {lua_ret}')

        lines.append(f'function {class_name}.{key}({", ".join(param_names)}) end')
        return lines
