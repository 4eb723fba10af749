import os

import pytest

from class_binding import (
    ClassInfo, ClassRegistry, CodeGen, CtorInfo, FieldInfo, LuaState, MethodInfo, ParamInfo,
)

BINDINGS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'scripts', 'bindings')
GEOMETRY_IR = os.path.join(BINDINGS_DIR, 'geometry.json')


@pytest.fixture
def registry():
    return ClassRegistry()


@pytest.fixture
def state():
    return LuaState('geometry')


@pytest.fixture
def point_info():
    return ClassInfo(
        name='Point',
        fields=[FieldInfo('x', 'int'), FieldInfo('y', 'int')],
        methods=[
            MethodInfo('getSum', 'int () const', [], is_const=True),
            MethodInfo('translate', 'void (int, int)',
                       [ParamInfo('dx', 'int'), ParamInfo('dy', 'int')]),
        ],
        ctors=[CtorInfo([ParamInfo('x', 'int'), ParamInfo('y', 'int')])],
    )


def generate(registrar) -> str:
    """Generate everything one registrar produces"""
    gen = CodeGen()
    registrar.generate_copier(gen)
    registrar.generate(gen)
    return gen.output()


def function_body(code: str, c_name: str) -> str:
    """Text of one generated lua_CFunction"""
    start = code.index(f'static int {c_name}(lua_State *L) {{')
    end = code.index('\n}', start)
    return code[start:end + 2]
