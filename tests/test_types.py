"""
Tests for Lua <-> C++ conversion snippets.
"""

import pytest

from class_binding import (
    BindingError, ClassRegistrar, ConversionContext, FunctionStore, TypeConverter, TypeHandler,
)
from class_binding.codegen import (
    as_c_identifier, as_lua_name, base_type, is_const, is_lua_identifier, normalize_type, value_type,
)


@pytest.fixture
def conv(registry, state, point_info):
    ClassRegistrar(point_info, registry).register(state, 'Point', ('int', 'int'), FunctionStore())
    return TypeConverter(registry, 'geometry')


class Vec3Handler(TypeHandler):
    """glm::vec3 travels as a table {x, y, z}"""

    def lua_to_cpp(self, ctx: ConversionContext) -> str:
        return f'glm::vec3 {ctx.var} = check_vec3(L, {ctx.idx});'

    def cpp_to_lua(self, ctx: ConversionContext) -> str:
        return f'push_vec3(L, {ctx.var});'

    def luacats_type(self) -> str:
        return 'number[]'


class TestLuaToCpp:
    @pytest.mark.parametrize('type_str, expected', [
        ('bool', 'bool v = lua_toboolean(L, 2);'),
        ('int', 'int v = (int)luaL_checkinteger(L, 2);'),
        ('unsigned int', 'unsigned int v = (unsigned int)luaL_checkinteger(L, 2);'),
        ('std::int64_t', 'std::int64_t v = (std::int64_t)luaL_checkinteger(L, 2);'),
        ('const int', 'int v = (int)luaL_checkinteger(L, 2);'),
        ('double', 'double v = (double)luaL_checknumber(L, 2);'),
        ('const char *', 'const char* v = luaL_checkstring(L, 2);'),
        ('std::string', 'std::string v = luaL_checkstring(L, 2);'),
        ('const std::string &', 'std::string v = luaL_checkstring(L, 2);'),
        ('void *', 'void* v = lua_touserdata(L, 2);'),
    ])
    def test_builtin(self, conv, type_str, expected):
        assert conv.lua_to_cpp(type_str, 2, 'v') == expected

    def test_class_pointer(self, conv):
        assert conv.lua_to_cpp('const Point *', 3, 'p') == \
            'const Point* p = (const Point*)luaL_checkudata(L, 3, "geometry.Point");'
        assert conv.lua_to_cpp('Point*', 3, 'p') == \
            'Point* p = (Point*)luaL_checkudata(L, 3, "geometry.Point");'

    def test_class_reference(self, conv):
        assert conv.lua_to_cpp('Point &', 1, 'p') == \
            'Point& p = *(Point*)luaL_checkudata(L, 1, "geometry.Point");'

    def test_unregistered_class(self, conv):
        with pytest.raises(BindingError):
            conv.lua_to_cpp('Polygon', 1, 'p')


class TestCppToLua:
    @pytest.mark.parametrize('type_str, expected', [
        ('void', ''),
        ('bool', 'lua_pushboolean(L, r);'),
        ('long', 'lua_pushinteger(L, (lua_Integer)r);'),
        ('float', 'lua_pushnumber(L, (lua_Number)r);'),
        ('const char *', 'lua_pushstring(L, r);'),
        ('const std::string &', 'lua_pushlstring(L, r.data(), r.size());'),
        ('const void *', 'lua_pushlightuserdata(L, (void*)r);'),
    ])
    def test_builtin(self, conv, type_str, expected):
        assert conv.cpp_to_lua(type_str, 'r') == expected

    def test_class_value_is_copied(self, conv):
        assert conv.cpp_to_lua('Point', 'r').splitlines() == [
            'void* ud = lua_newuserdatauv(L, sizeof(Point), 0);',
            'lpp_Point_copy(ud, r);',
            'luaL_setmetatable(L, "geometry.Point");',
        ]

    def test_class_pointer_is_copied_or_nil(self, conv):
        lines = conv.cpp_to_lua('const Point *', 'r').splitlines()
        assert lines[0] == 'if (r == nullptr) {'
        assert '    lua_pushnil(L);' in lines
        assert '    lpp_Point_copy(ud, *r);' in lines

    def test_unsupported(self, conv):
        with pytest.raises(BindingError):
            conv.cpp_to_lua('std::vector<int>', 'r')


class TestLuaCATS:
    @pytest.mark.parametrize('type_str, expected', [
        ('void', 'nil'),
        ('bool', 'boolean'),
        ('int', 'integer'),
        ('double', 'number'),
        ('const std::string &', 'string'),
        ('const Point &', 'geometry.Point'),
        ('std::vector<int>', 'any'),
    ])
    def test_types(self, conv, type_str, expected):
        assert conv.luacats_type(type_str) == expected


class TestHandlers:
    def test_custom_handler_wins(self, conv):
        conv.register('glm::vec3', Vec3Handler())
        assert conv.has_handler('glm::vec3')
        assert conv.lua_to_cpp('const glm::vec3 &', 2, 'v') == 'glm::vec3 v = check_vec3(L, 2);'
        assert conv.cpp_to_lua('glm::vec3', 'r') == 'push_vec3(L, r);'
        assert conv.luacats_type('glm::vec3') == 'number[]'


class TestSpellings:
    def test_normalize(self):
        assert normalize_type('const Point &') == 'const Point&'
        assert normalize_type('char  *') == 'char*'

    def test_value_type(self):
        assert value_type('const std::string &') == 'std::string'
        assert value_type('const char *') == 'const char*'
        assert value_type('int* const') == 'int*'

    def test_base_type(self):
        assert base_type('const geo::Point *') == 'geo::Point'
        assert base_type('unsigned int') == 'unsigned int'

    def test_is_const(self):
        assert is_const('const int')
        assert is_const('int* const')
        assert not is_const('const char *')
        assert not is_const('int')

    def test_names(self):
        assert as_c_identifier('geo::Point') == 'geo_Point'
        assert as_lua_name('geo::Point') == 'Point'
        assert is_lua_identifier('Point')
        assert not is_lua_identifier('end')
        assert not is_lua_identifier('geo::Point')
