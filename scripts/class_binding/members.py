"""
Member binding module

Lua only calls functions, so every member becomes one or more functions on
the class metatable:

    method          -> name(self, ...)
    field           -> name(self), set_name(self, value)
    const field     -> name(self)
"""

from dataclasses import dataclass
from typing import Optional, Union, TYPE_CHECKING

from .codegen import is_lua_identifier
from .errors import BindingError
from .ir import FieldInfo, MethodInfo, ParamInfo

if TYPE_CHECKING:
    from .func import Marshaller
    from .registry import CallableWrapper, ClassBinding, FunctionStore
    from .state import TypeTag

SETTER_PREFIX = 'set_'


@dataclass(frozen=True)
class MutatingMethod:
    """Method called through `T* self`"""
    name: str
    method: MethodInfo


@dataclass(frozen=True)
class ReadOnlyMethod:
    """Method called through `const T* self`"""
    name: str
    method: MethodInfo


@dataclass(frozen=True)
class MutableField:
    """Field with a getter and a set_<name> setter"""
    name: str
    field: FieldInfo


@dataclass(frozen=True)
class ImmutableField:
    """Field with a getter only"""
    name: str
    field: FieldInfo


MemberDescriptor = Union[MutatingMethod, ReadOnlyMethod, MutableField, ImmutableField]


def describe(name: str, member: Union[MethodInfo, FieldInfo]) -> MemberDescriptor:
    """Pick the descriptor matching the shape of a native member"""
    if isinstance(member, MethodInfo):
        return ReadOnlyMethod(name, member) if member.is_const else MutatingMethod(name, member)
    if isinstance(member, FieldInfo):
        return ImmutableField(name, member) if member.is_const else MutableField(name, member)
    raise BindingError(f'{name!r}: cannot bind a {type(member).__name__}')


class MemberBinder:
    """Installs members of one class into its type tag"""

    def __init__(self, binding: 'ClassBinding', marshaller: 'Marshaller',
                 tag: Optional['TypeTag'] = None, functions: Optional['FunctionStore'] = None):
        self.binding = binding
        self.marshaller = marshaller
        # Where entries go; a registration in progress passes its staged copies
        self.tag = tag if tag is not None else binding.type_tag
        self.functions = functions if functions is not None else binding.functions
        self._dispatch = {
            MutatingMethod: self._bind_mutating_method,
            ReadOnlyMethod: self._bind_readonly_method,
            MutableField: self._bind_mutable_field,
            ImmutableField: self._bind_immutable_field,
        }

    def bind(self, member: MemberDescriptor) -> list[str]:
        """Bind one member, return the table entries it installed"""
        bind = self._dispatch.get(type(member))
        if bind is None:
            raise BindingError(f'{self.binding.type_name}: not a member descriptor: {member!r}')
        if not is_lua_identifier(member.name) or member.name.startswith('__'):
            # "__" names are metamethods, e.g. the __index self-reference
            raise BindingError(f'{self.binding.type_name}: bad member name {member.name!r}')
        return bind(member)

    def _install(self, key: str, wrapper: 'CallableWrapper') -> str:
        self.functions.add(wrapper)
        self.tag.set(key, wrapper)
        return key

    def _c_name(self, lua_name: str) -> str:
        return f'l_{self.binding.c_name}_{lua_name}'

    # Methods

    def _bind_mutating_method(self, member: MutatingMethod) -> list[str]:
        if member.method.is_const:
            raise BindingError(f'{self.binding.type_name}::{member.method.name} is const, '
                               f'bind it as a read-only method')
        return [self._install(member.name, self._wrap_method(member.name, member.method, False))]

    def _bind_readonly_method(self, member: ReadOnlyMethod) -> list[str]:
        if not member.method.is_const:
            raise BindingError(f'{self.binding.type_name}::{member.method.name} is not const, '
                               f'it cannot be called on a read-only instance')
        return [self._install(member.name, self._wrap_method(member.name, member.method, True))]

    def _wrap_method(self, lua_name: str, method: MethodInfo, readonly: bool) -> 'CallableWrapper':
        method_name = method.name
        return self.marshaller.wrap(
            self._c_name(lua_name), self.binding, readonly,
            method.params, method.return_type,
            lambda args: f'self->{method_name}({", ".join(args)})',
        )

    # Fields

    def _bind_mutable_field(self, member: MutableField) -> list[str]:
        setter = self._synthesize_setter(member)
        getter = self._synthesize_getter(member.name, member.field)
        return [
            self._install(SETTER_PREFIX + member.name, setter),
            self._install(member.name, getter),
        ]

    def _bind_immutable_field(self, member: ImmutableField) -> list[str]:
        return [self._install(member.name, self._synthesize_getter(member.name, member.field))]

    def _synthesize_getter(self, lua_name: str, field: FieldInfo) -> 'CallableWrapper':
        field_name = field.name
        return self.marshaller.wrap(
            self._c_name(lua_name), self.binding, True,
            [], field.type,
            lambda args: f'self->{field_name}',
        )

    def _synthesize_setter(self, member: MemberDescriptor) -> 'CallableWrapper':
        if not isinstance(member, MutableField) or member.field.is_const:
            raise BindingError(f'{self.binding.type_name}::{member.name} is immutable, '
                               f'no setter can be generated')
        field_name = member.field.name
        lua_name = SETTER_PREFIX + member.name
        return self.marshaller.wrap(
            self._c_name(lua_name), self.binding, False,
            [ParamInfo(name='val', type=member.field.type)], 'void',
            lambda args: f'self->{field_name} = {args[0]}',
        )
