#!/usr/bin/env python3
"""
clustervip CLI package.
"""

from .parsers import main

__all__ = ["main"]
