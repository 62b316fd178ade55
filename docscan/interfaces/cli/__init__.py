"""Command line interface."""

from .main import create_parser, main

__all__ = [
    'create_parser',
    'main',
]
