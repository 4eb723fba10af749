#!/usr/bin/env python3
"""
gen_classes.py - class binding generator entry point

Generates Lua bindings for the C++ classes described by IR files.

Usage:
    python scripts/gen_classes.py IR.json [IR.json ...] [--output DIR] [--config NAME ...]
"""

import argparse
import importlib
import os
import sys

# Get paths
script_dir = os.path.dirname(os.path.abspath(__file__))
root_dir = os.path.abspath(os.path.join(script_dir, '..'))

# Add scripts directory to path
sys.path.insert(0, script_dir)

from class_binding import Generator, BindingError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate Lua bindings for C++ classes')
    parser.add_argument('ir', nargs='+',
                        help='IR JSON file(s) describing the classes to bind')
    parser.add_argument('--output', default=root_dir,
                        help='Output root; files go to gen/bindings and gen/types')
    parser.add_argument('--config', action='append', default=[],
                        help='Binding configuration module under scripts/bindings (repeatable)')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    gen = Generator(output_root=args.output)

    # Apply library-specific configuration
    for name in args.config:
        config = importlib.import_module(f'bindings.{name}')
        config.configure(gen)

    try:
        gen.generate_all(args.ir)
    except BindingError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
