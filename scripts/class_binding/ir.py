"""
IR (Intermediate Representation) module

Reads and represents C++ class declarations dumped to JSON.

Expected layout:

    {
        "module": "geometry",
        "headers": ["geometry.hpp"],
        "decls": [
            {
                "kind": "class",
                "name": "geo::Point",
                "fields": [{"name": "x", "type": "int"}],
                "methods": [{"name": "getSum", "type": "int () const", "params": []}],
                "ctors": [{"params": [{"name": "x", "type": "int"}, {"name": "y", "type": "int"}]}]
            }
        ]
    }
"""

from dataclasses import dataclass, field
from typing import Optional
import json

from .codegen import is_const, is_const_method, normalize_type
from .errors import BindingError


@dataclass
class ParamInfo:
    """Function parameter information"""
    name: str
    type: str


@dataclass
class FieldInfo:
    """Data member information"""
    name: str
    type: str

    @property
    def is_const(self) -> bool:
        return is_const(self.type)


@dataclass
class MethodInfo:
    """Member function information"""
    name: str
    type: str  # Full function type signature, e.g. "int (int) const"
    params: list[ParamInfo]
    is_const: bool = False
    comment: str = ""

    @property
    def return_type(self) -> str:
        """Extract return type from full type signature"""
        return self.type[:self.type.index('(')].strip()


@dataclass
class CtorInfo:
    """Constructor information"""
    params: list[ParamInfo]

    @property
    def signature(self) -> tuple[str, ...]:
        return tuple(normalize_type(p.type) for p in self.params)


@dataclass
class ClassInfo:
    """C++ class information"""
    name: str
    fields: list[FieldInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    ctors: list[CtorInfo] = field(default_factory=list)
    comment: str = ""

    def get_field(self, name: str) -> Optional[FieldInfo]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_method(self, name: str) -> Optional[MethodInfo]:
        """Get the single method with this name

        Lua has no overload resolution, so an overloaded name cannot be bound.
        """
        found = [m for m in self.methods if m.name == name]
        if len(found) > 1:
            raise BindingError(f'{self.name}::{name} is overloaded ({len(found)} declarations)')
        return found[0] if found else None

    def find_ctor(self, arg_types) -> Optional[CtorInfo]:
        """Find the constructor whose parameter types are exactly arg_types"""
        wanted = tuple(normalize_type(t) for t in arg_types)
        if not self.ctors:
            # Nothing declared: only the implicit default constructor exists
            return CtorInfo(params=[]) if not wanted else None
        for ctor in self.ctors:
            if ctor.signature == wanted:
                return ctor
        return None


@dataclass
class IR:
    """Intermediate representation of a C++ header"""
    module: str
    headers: list[str]
    classes: dict[str, ClassInfo]
    comment: str = ""

    @classmethod
    def load(cls, json_path: str) -> 'IR':
        """Load IR from a JSON file"""
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'IR':
        """Create IR from a dictionary"""
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> 'IR':
        """Internal: Parse dict into IR"""
        classes = {}

        for decl in data.get('decls', []):
            if decl.get('kind') in ('class', 'struct'):
                info = cls._parse_class(decl)
                classes[info.name] = info

        return cls(
            module=data.get('module', ''),
            headers=data.get('headers', []),
            classes=classes,
            comment=data.get('comment', ''),
        )

    @staticmethod
    def _parse_params(decl: dict) -> list[ParamInfo]:
        params = []
        for i, p in enumerate(decl.get('params', [])):
            params.append(ParamInfo(
                name=p.get('name') or f'arg{i + 1}',
                type=p['type'],
            ))
        return params

    @classmethod
    def _parse_class(cls, decl: dict) -> ClassInfo:
        """Parse class declaration"""
        fields = [FieldInfo(name=f['name'], type=f['type'])
                  for f in decl.get('fields', []) if 'name' in f]

        methods = []
        for m in decl.get('methods', []):
            method_type = m['type']
            methods.append(MethodInfo(
                name=m['name'],
                type=method_type,
                params=cls._parse_params(m),
                is_const=m.get('is_const', is_const_method(method_type)),
                comment=m.get('comment', ''),
            ))

        ctors = [CtorInfo(params=cls._parse_params(c)) for c in decl.get('ctors', [])]

        return ClassInfo(
            name=decl['name'],
            fields=fields,
            methods=methods,
            ctors=ctors,
            comment=decl.get('comment', ''),
        )

    def get_class(self, name: str) -> ClassInfo:
        if name not in self.classes:
            raise BindingError(f'unknown class {name!r} in module {self.module!r}')
        return self.classes[name]
