"""
class_binding - Lua binding generation for C++ classes

Exposes native classes to Lua through the Lua C API: every class gets a
metatable with a `new` constructor that builds the instance inside Lua-owned
userdata, a wrapper per method, and a getter (plus `set_<name>` setter for
non-const fields) per data member.
"""

from .errors import BindingError
from .ir import IR, ClassInfo, FieldInfo, MethodInfo, CtorInfo, ParamInfo
from .types import TypeConverter, TypeHandler, ConversionContext
from .codegen import CodeGen
from .registry import (
    ClassBinding, ClassRegistry, FunctionStore, CallableWrapper, SymbolTable,
    REGISTRY, is_registered, registered_name,
)
from .state import LuaState, TypeTag
from .func import Marshaller
from .members import (
    MemberBinder, MutatingMethod, ReadOnlyMethod, MutableField, ImmutableField, describe,
)
from .factory import InstanceFactory
from .registrar import ClassRegistrar, ClassBuilder
from .luacats import LuaCATSGenerator
from .generator import Generator, ClassHandler

__all__ = [
    'BindingError',
    'IR', 'ClassInfo', 'FieldInfo', 'MethodInfo', 'CtorInfo', 'ParamInfo',
    'TypeConverter', 'TypeHandler', 'ConversionContext',
    'CodeGen',
    'ClassBinding', 'ClassRegistry', 'FunctionStore', 'CallableWrapper', 'SymbolTable',
    'REGISTRY', 'is_registered', 'registered_name',
    'LuaState', 'TypeTag',
    'Marshaller',
    'MemberBinder', 'MutatingMethod', 'ReadOnlyMethod', 'MutableField', 'ImmutableField', 'describe',
    'InstanceFactory',
    'ClassRegistrar', 'ClassBuilder',
    'LuaCATSGenerator',
    'Generator', 'ClassHandler',
]
