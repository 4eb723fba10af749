"""
Function binding generation module

Turns a native call with a fixed signature into a lua_CFunction that reads
its arguments from the Lua stack and pushes its result back.
"""

from functools import partial
from typing import Callable, Optional, Sequence, TYPE_CHECKING

from .codegen import CodeGen, is_reference, strip_ref, value_type
from .registry import CallableWrapper

if TYPE_CHECKING:
    from .ir import ParamInfo
    from .registry import ClassBinding
    from .types import TypeConverter

# Locals every wrapper may declare itself
RESERVED_LOCALS = {'L', 'self', 'result', 'ud', 'addr', 'other'}

# Builds the C++ call expression from the decoded argument names
CallBuilder = Callable[[list[str]], str]


class Marshaller:
    """Generates lua_CFunction wrappers"""

    def __init__(self, type_conv: 'TypeConverter'):
        self.type_conv = type_conv

    def decode_args(self, params: Sequence['ParamInfo'], first_idx: int, gen: CodeGen) -> list[str]:
        """Emit reads of params from stack slots first_idx.., return local names"""
        names = []
        for i, param in enumerate(params):
            var = param.name if param.name not in RESERVED_LOCALS else f'{param.name}_'
            code = self.type_conv.lua_to_cpp(param.type, first_idx + i, var)
            gen.lines(*code.splitlines())
            names.append(var)
        return names

    def push_result(self, return_type: str, var: str, gen: CodeGen) -> int:
        """Emit the push of a return value, return the number of values pushed"""
        code = self.type_conv.cpp_to_lua(return_type, var)
        if not code:
            return 0
        gen.lines(*code.splitlines())
        return 1

    def wrap(self, c_name: str, binding: 'ClassBinding', self_const: Optional[bool],
             params: Sequence['ParamInfo'], return_type: str, call: CallBuilder) -> CallableWrapper:
        """Wrap a call on an instance of binding's class

        self_const selects `const T*` (True) or `T*` (False) for the instance
        in stack slot 1; None means the call takes no instance.
        """
        if self_const is None:
            self_type = None
        else:
            self_type = f'{"const " if self_const else ""}{binding.type_name}*'
        return CallableWrapper(
            c_name=c_name,
            params=list(params),
            return_type=return_type,
            self_type=self_type,
            emit=partial(self._emit_function, binding, self_type, tuple(params), return_type, call),
        )

    def _emit_function(self, binding: 'ClassBinding', self_type: Optional[str],
                       params: tuple, return_type: str, call: CallBuilder,
                       gen: CodeGen, c_name: str):
        with gen.block(f'static int {c_name}(lua_State *L) {{'):
            first_idx = 1
            if self_type is not None:
                gen.line(f'{self_type} self = ({self_type})luaL_checkudata(L, 1, "{binding.metatable}");')
                first_idx = 2

            args = self.decode_args(params, first_idx, gen)
            expr = call(args)

            if value_type(return_type) == 'void':
                gen.line(f'{expr};')
                gen.line('return 0;')
            else:
                if is_reference(return_type):
                    gen.line(f'{strip_ref(return_type)}& result = {expr};')
                else:
                    gen.line(f'{value_type(return_type)} result = {expr};')
                count = self.push_result(return_type, 'result', gen)
                gen.line(f'return {count};')
        gen.line()
