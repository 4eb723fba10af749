"""
Generation-time model of the lua_State bindings are installed into

Tracks the metatables (type tags) the generated module creates and the
names they are exported under.
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .codegen import is_lua_identifier
from .errors import BindingError

if TYPE_CHECKING:
    from .registry import CallableWrapper


@dataclass
class TypeTag:
    """A class metatable and its dispatch table"""
    key: str   # luaL_newmetatable registry key
    name: str  # Name scripts see
    self_index: bool = False
    entries: dict[str, 'CallableWrapper'] = field(default_factory=dict)

    def set_self_index(self):
        """metatable.__index = metatable, so instances find entries"""
        self.self_index = True

    def set(self, key: str, wrapper: 'CallableWrapper'):
        """Install an entry; an existing entry with the same key is replaced"""
        if not key:
            raise BindingError(f'empty entry name on {self.name}')
        self.entries.pop(key, None)
        self.entries[key] = wrapper

    def get(self, key: str) -> Optional['CallableWrapper']:
        return self.entries.get(key)

    def keys(self) -> list[str]:
        return list(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries


class LuaState:
    """Type tags created by one generated module"""

    def __init__(self, module: str):
        self.module = module
        self._tags: dict[str, TypeTag] = {}
        self.exports: dict[str, TypeTag] = {}

    def type_tag(self, key: str, name: str) -> TypeTag:
        """Create or fetch the type tag stored under key, exported as name"""
        return self.install(self.stage(key, name))

    def stage(self, key: str, name: str) -> TypeTag:
        """Working copy of the tag under key; nothing is visible until install()"""
        if not key:
            raise BindingError(f'cannot create a metatable without a key (name {name!r})')
        if not is_lua_identifier(name):
            raise BindingError(f'{name!r} is not a valid Lua name')

        current = self._tags.get(key)
        if current is None:
            return TypeTag(key=key, name=name)
        # luaL_newmetatable hands back the existing table, entries included
        return TypeTag(key=key, name=name, self_index=current.self_index,
                       entries=dict(current.entries))

    def install(self, tag: TypeTag) -> TypeTag:
        """Make tag the one stored under its key and export it"""
        current = self._tags.get(tag.key)
        if current is not None and self.exports.get(current.name) is current:
            del self.exports[current.name]
        self._tags[tag.key] = tag
        # Last registration under a name is the one scripts see
        self.exports[tag.name] = tag
        return tag

    def tags(self) -> list[TypeTag]:
        return list(self._tags.values())
