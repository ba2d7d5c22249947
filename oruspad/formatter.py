"""Turn a `RunResult` into the text shown in the editor's result panel."""

from typing import Any

from .errors import OrusError
from .interpreter import RunResult, simulate

NO_OUTPUT_MESSAGE = 'Program executed successfully with no output.'


def format_error(error: OrusError) -> str:
    text = f"Error: {error.kind}: {error.message}"
    if error.position is not None:
        text += f" (line {error.position.line}, column {error.position.column})"
    return text


def format_result(result: RunResult) -> str:
    if result.error is not None:
        return format_error(result.error)
    if not result.output:
        return NO_OUTPUT_MESSAGE
    return '\n'.join(result.output)


def format_diagnostics(result: RunResult) -> str:
    return '\n'.join(f"Warning: {message}" for message in result.diagnostics)


def render(source: str, mode: str = 'normal', **kwargs: Any) -> str:
    """Run `source` and return the panel text in one call."""
    return format_result(simulate(source, mode=mode, **kwargs))
