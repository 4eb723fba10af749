"""
Code generation utilities

Provides helpers for generating C++ and Lua code, and for taking apart
C++ type spellings.
"""

import re


# Lua reserved keywords
LUA_KEYWORDS = {
    'and', 'break', 'do', 'else', 'elseif', 'end', 'false', 'for',
    'function', 'goto', 'if', 'in', 'local', 'nil', 'not', 'or',
    'repeat', 'return', 'then', 'true', 'until', 'while'
}

_IDENTIFIER_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = '    '  # 4 spaces

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def lines(self, *texts: str):
        """Add multiple lines"""
        for text in texts:
            self.line(text)

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, footer: str = '}'):
        """Context manager for code blocks"""
        return _BlockContext(self, header, footer)

    def output(self) -> str:
        """Get generated code as string"""
        return '\n'.join(self._lines)


class _BlockContext:
    """Context manager for indented code blocks"""

    def __init__(self, gen: CodeGen, header: str, footer: str):
        self._gen = gen
        self._header = header
        self._footer = footer

    def __enter__(self):
        self._gen.line(self._header)
        self._gen.indent()
        return self

    def __exit__(self, *args):
        self._gen.dedent()
        self._gen.line(self._footer)


def as_c_identifier(type_name: str) -> str:
    """Turn a qualified C++ name into something usable inside a C symbol

    Examples:
        geo::Point -> geo_Point
        Point -> Point
    """
    return re.sub(r'\W+', '_', type_name.replace('::', '_')).strip('_')


def as_lua_name(type_name: str) -> str:
    """Default Lua name for a C++ class: the unqualified name

    Examples:
        geo::Point -> Point
    """
    return type_name.split('::')[-1]


def is_lua_identifier(name: str) -> bool:
    """Check if name can be written as `Module.name` in Lua source"""
    return bool(_IDENTIFIER_RE.match(name)) and name not in LUA_KEYWORDS


def is_int_type(type_str: str) -> bool:
    """Check if type is an integer type"""
    return type_str in [
        'int', 'char', 'short', 'long', 'long long',
        'unsigned', 'unsigned int', 'unsigned char', 'unsigned short',
        'unsigned long', 'unsigned long long',
        'int8_t', 'uint8_t',
        'int16_t', 'uint16_t',
        'int32_t', 'uint32_t',
        'int64_t', 'uint64_t',
        'size_t', 'uintptr_t', 'intptr_t',
        'std::int8_t', 'std::uint8_t',
        'std::int16_t', 'std::uint16_t',
        'std::int32_t', 'std::uint32_t',
        'std::int64_t', 'std::uint64_t',
        'std::size_t',
    ]


def is_float_type(type_str: str) -> bool:
    """Check if type is a float type"""
    return type_str in ['float', 'double', 'long double']


def is_string_ptr(type_str: str) -> bool:
    """Check if type is a C string"""
    return normalize_type(type_str) == 'const char*'


def is_std_string(type_str: str) -> bool:
    """Check if type is std::string by value or by reference"""
    return base_type(type_str) == 'std::string' and not is_pointer(type_str)


def is_void_ptr(type_str: str) -> bool:
    """Check if type is void* or const void*"""
    return normalize_type(type_str) in ('void*', 'const void*')


def is_pointer(type_str: str) -> bool:
    return normalize_type(type_str).endswith('*')


def is_reference(type_str: str) -> bool:
    return normalize_type(type_str).endswith('&')


def is_const(type_str: str) -> bool:
    """Check if the outermost value is const-qualified"""
    normalized = strip_ref(type_str)
    if '*' in normalized:
        # "int* const" is const, "const int*" only points at const
        return normalized.endswith('const')
    return normalized.startswith('const ') or normalized.endswith(' const')


def is_const_method(func_type: str) -> bool:
    """Check the qualifiers after a member function's parameter list

    Examples:
        "int () const noexcept" -> True
        "int () const &" -> True
        "void (const Point &)" -> False
    """
    start = func_type.find('(')
    if start < 0:
        return False
    depth = 0
    for i in range(start, len(func_type)):
        if func_type[i] == '(':
            depth += 1
        elif func_type[i] == ')':
            depth -= 1
            if depth == 0:
                qualifiers = func_type[i + 1:].replace('&', ' ').split()
                return 'const' in qualifiers
    return False


def normalize_type(type_str: str) -> str:
    """Normalize pointer/reference spacing

    Examples:
        "const Point &" -> "const Point&"
        "char *" -> "char*"
    """
    result = ' '.join(type_str.split())
    for sym in ('*', '&'):
        result = result.replace(f' {sym}', sym)
    return result


def strip_ref(type_str: str) -> str:
    """Drop a trailing reference

    Examples:
        "const std::string &" -> "const std::string"
    """
    normalized = normalize_type(type_str)
    return normalized.rstrip('&').strip()


def value_type(type_str: str) -> str:
    """Decay a type to the value stored in a local or field

    Examples:
        "const std::string &" -> "std::string"
        "const int" -> "int"
        "const char *" -> "const char*"
    """
    result = strip_ref(type_str)
    if result.endswith('*'):
        return result
    if result.startswith('const '):
        result = result[len('const '):]
    if result.endswith(' const'):
        result = result[:-len(' const')]
    return result.strip()


def base_type(type_str: str) -> str:
    """Extract the named type from a pointer/reference/const spelling

    Examples:
        "const geo::Point *" -> "geo::Point"
        "Point &" -> "Point"
    """
    tokens = type_str.replace('*', ' ').replace('&', ' ').split()
    return ' '.join(t for t in tokens if t not in ('const', 'volatile', 'struct', 'class'))
