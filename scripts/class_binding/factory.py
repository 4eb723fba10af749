"""
Instance factory module

Generates the `new` entry point, which constructs a native instance directly
inside a userdata block owned by Lua, and the copy helper used whenever a
class value has to be handed to Lua.
"""

from typing import Sequence, TYPE_CHECKING

from .codegen import CodeGen
from .registry import CallableWrapper

if TYPE_CHECKING:
    from .ir import ParamInfo
    from .func import Marshaller
    from .registry import ClassBinding


class InstanceFactory:
    """Generates construction code for one class

    The userdata block is sized exactly sizeof(T) and stays owned by Lua.
    No __gc is installed, so the destructor of T never runs.
    """

    def __init__(self, binding: 'ClassBinding', marshaller: 'Marshaller'):
        self.binding = binding
        self.marshaller = marshaller

    def constructor(self, params: Sequence['ParamInfo']) -> CallableWrapper:
        """Wrapper installed as Class.new(...)"""
        params = list(params)
        return CallableWrapper(
            c_name=f'l_{self.binding.c_name}_new',
            params=params,
            return_type=self.binding.type_name,
            self_type=None,
            emit=lambda gen, c_name: self._gen_new(params, gen, c_name),
        )

    def _gen_new(self, params: list['ParamInfo'], gen: CodeGen, c_name: str):
        type_name = self.binding.type_name
        with gen.block(f'static int {c_name}(lua_State *L) {{'):
            args = self.marshaller.decode_args(params, 1, gen)
            gen.line(f'void* addr = lua_newuserdatauv(L, sizeof({type_name}), 0);')
            gen.line(f'new (addr) {type_name}({", ".join(args)});')
            gen.line(f'luaL_setmetatable(L, "{self.binding.metatable}");')
            gen.line('return 1;')
        gen.line()

    def copier(self, gen: CodeGen):
        """Copy-construct an existing instance into a fresh block"""
        type_name = self.binding.type_name
        with gen.block(f'static void {self.binding.copy_func}(void* addr, const {type_name}& other) {{'):
            gen.line(f'new (addr) {type_name}(other);')
        gen.line()
