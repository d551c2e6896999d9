"""
Runtime objects wrapping engine handles.

This module provides:
- Namespace: host function registration and script compilation
- Script: a compiled unit of source
- Evaluator: a standalone expression evaluator
- Args: argument access inside host functions
- Block: host-callable wrapper around an engine closure
- SymbolTable: per-namespace argument name interning
"""

from .handles import (
    Owner,
    Resource,
)

from .symbols import SymbolTable
from .blocks import Block
from .args import Args
from .script import Script
from .namespace import Namespace
from .evaluator import Evaluator

__all__ = [
    'Owner',
    'Resource',
    'SymbolTable',
    'Block',
    'Args',
    'Script',
    'Namespace',
    'Evaluator',
]
