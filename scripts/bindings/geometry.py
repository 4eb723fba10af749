"""
Geometry binding configuration

Configures the class binding generator for the geo:: example classes:
- Point is built from two coordinates rather than default-constructed
- Rect exposes `name` as `label`, and keeps its size read-only
"""

from class_binding import Generator


def configure(gen: Generator):
    """Configure generator with geometry-specific settings"""

    point = gen.class_handler('geo::Point')
    point.constructor = ('int', 'int')

    rect = gen.class_handler('geo::Rect')
    rect.renames = {'name': 'label'}
    rect.readonly = ['width', 'height']
