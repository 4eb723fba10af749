"""
Tests for LuaCATS type definitions.
"""

from class_binding import (
    ClassInfo, ClassRegistrar, FunctionStore, LuaCATSGenerator, MethodInfo,
    MutableField, MutatingMethod, ParamInfo, ReadOnlyMethod, TypeConverter,
)


def _point_types(registry, state, point_info):
    ClassRegistrar(point_info, registry).register(
        state, 'Point', ('int', 'int'), FunctionStore(),
        MutableField('x', point_info.get_field('x')),
        ReadOnlyMethod('getSum', point_info.get_method('getSum')),
    )
    return LuaCATSGenerator(state, TypeConverter(registry, 'geometry')).generate()


class TestClasses:
    def test_header(self, registry, state, point_info):
        lines = _point_types(registry, state, point_info).splitlines()
        assert lines[0] == '---@meta'
        assert lines[1] == '-- LuaCATS type definitions for geometry'

    def test_constructor(self, registry, state, point_info):
        text = _point_types(registry, state, point_info)
        assert ('---@param x integer\n'
                '---@param y integer\n'
                '---@return geometry.Point\n'
                'function Point.new(x, y) end') in text

    def test_getter_and_setter(self, registry, state, point_info):
        text = _point_types(registry, state, point_info)
        assert ('---@param self geometry.Point\n'
                '---@return integer\n'
                'function Point.x(self) end') in text
        assert ('---@param self geometry.Point\n'
                '---@param val integer\n'
                'function Point.set_x(self, val) end') in text

    def test_module_table(self, registry, state, point_info):
        text = _point_types(registry, state, point_info)
        assert '---@class geometry\n---@field Point geometry.Point\nlocal geometry = {}' in text
        assert text.endswith('return geometry')

    def test_keyword_params(self, registry, state):
        info = ClassInfo(
            name='Loop',
            methods=[MethodInfo('step', 'void (int)', [ParamInfo('until', 'int')])],
        )
        ClassRegistrar(info, registry).register(
            state, 'Loop', (), FunctionStore(),
            MutatingMethod('step', info.get_method('step')),
        )
        text = LuaCATSGenerator(state, TypeConverter(registry, 'geometry')).generate()
        assert '---@param until_ integer\nfunction Loop.step(self, until_) end' in text
