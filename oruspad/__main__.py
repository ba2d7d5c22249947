"""CLI entry point for the Orus playground simulator.

Usage:
    python -m oruspad [-v...] [--mode normal|debug] [--max-steps N] [--max-iterations N] <program_file>
    python -m oruspad [-v...] --emit-ast <program_file>
    python -m oruspad [-v...] --ast <ast_json_file>
    python -m oruspad --highlight <program_file>
    python -m oruspad --share <program_file>
    python -m oruspad --unshare <token>
    python -m oruspad [-v...] [--mode ...] --example <name>

Options:
  -v            Increase debug verbosity (can be repeated)
  --mode        'normal' prints the program's output, 'debug' appends the
                final variable bindings
  --emit-ast    Parse the given .orus file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --highlight   Print one CLASS<TAB>text line per highlighted token
  --share       Print the share token for a program
  --unshare     Print the program held by a share token
  --example     Run one of the bundled example programs

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. The result panel text goes to stdout and
interpolation warnings to stderr; the exit status is 1 when the program
failed.
"""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .config import DEFAULT_LIMITS, MODES
from .errors import OrusError
from .formatter import format_diagnostics, format_error, format_result
from .highlight import highlight
from .interpreter import Interpreter, RunResult, simulate
from .parser import parse_program
from .samples import EXAMPLES
from .share import ShareDecodeError, decode_source, encode_source


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def report(result: RunResult) -> None:
    print(format_result(result))
    if result.diagnostics:
        print(format_diagnostics(result), file=sys.stderr)
    if not result.ok:
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Orus playground simulator")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--mode', choices=MODES, default='normal', help='execution mode')
    parser.add_argument('--max-steps', type=int, default=DEFAULT_LIMITS.max_steps,
                        help='statement budget for one run')
    parser.add_argument('--max-iterations', type=int, default=DEFAULT_LIMITS.max_iterations,
                        help='loop iteration budget for one run')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='ORUS_FILE', help='emit AST JSON for the given .orus file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--highlight', metavar='ORUS_FILE', help='print highlighted tokens')
    group.add_argument('--share', metavar='ORUS_FILE', help='print a share token')
    group.add_argument('--unshare', metavar='TOKEN', help='decode a share token')
    group.add_argument('--example', choices=sorted(EXAMPLES), help='run a bundled example')
    parser.add_argument('program', nargs='?', help='Orus program file (.orus) to execute')
    args = parser.parse_args(argv)

    limits = replace(DEFAULT_LIMITS, max_steps=max(0, args.max_steps),
                     max_iterations=max(0, args.max_iterations))

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(args.emit_ast)
        try:
            ast_program = parse_program(source)
        except OrusError as e:
            print(format_error(e))
            sys.exit(1)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        ast_program = ast_from_obj(data)
        interpreter = Interpreter(limits=limits, debug_level=args.v)
        report(interpreter.run(ast_program, mode=args.mode))
        return

    if args.highlight:
        for css_class, text in highlight(read_source(args.highlight)):
            print(f"{css_class}\t{text!r}")
        return

    if args.share:
        print(encode_source(read_source(args.share)))
        return

    if args.unshare:
        try:
            print(decode_source(args.unshare))
        except ShareDecodeError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    if args.example:
        source = EXAMPLES[args.example]
    else:
        # Default: execute source file
        if not args.program:
            parser.error('missing program file; or use --example/--emit-ast/--ast')
        source = read_source(args.program)
    report(simulate(source, mode=args.mode, limits=limits, debug_level=args.v))


if __name__ == '__main__':
    main()
