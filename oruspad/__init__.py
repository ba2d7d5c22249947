# OrusPad simulator package
# This package parses Orus playground programs and simulates their execution.
from .config import Limits, DEFAULT_LIMITS
from .errors import OrusError, OrusSyntaxError
from .formatter import format_result, render
from .interpreter import Interpreter, RunResult, simulate
from .lexer import tokenize
from .parser import parse_program
from .session import EvaluationSession

__all__ = [
    'simulate',
    'render',
    'format_result',
    'parse_program',
    'tokenize',
    'Interpreter',
    'RunResult',
    'Limits',
    'DEFAULT_LIMITS',
    'EvaluationSession',
    'OrusError',
    'OrusSyntaxError',
]
