"""CLI entry point for the treelox interpreter.

Usage:
    python -m treelox [-v|-vv|-vvv|-vvvv] [--no-color] [script]
    python -m treelox [-v...] -e EXPRESSION
    python -m treelox [-v...] --emit-ast <script>
    python -m treelox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --no-color    Print diagnostics without ANSI colors
  -e            Evaluate a single expression and print its value
  --emit-ast    Parse the given script and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a script the interactive shell starts. Debug information is
written to `debug.txt` in the current directory when verbosity is
greater than zero.

Exit status: 0 on success, 65 after a scan or parse error, 70 after a
runtime error, 66 when an input file cannot be read, 130 on interrupt.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import ast_from_obj, ast_to_obj
from .errors import ErrorReporter
from .interpreter import Interpreter, evaluate_expression, parse_program
from .shell import Shell
from .types import to_string

EX_OK = 0
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70
EX_INTERRUPTED = 130


def read_source(path: Path) -> Optional[str]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return None


def exit_status(reporter: ErrorReporter) -> int:
    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def emit_ast(program_file: Path, reporter: ErrorReporter) -> int:
    source = read_source(program_file)
    if source is None:
        return EX_NOINPUT
    program = parse_program(source, reporter)
    if reporter.had_error:
        return EX_DATAERR
    out_path = program_file.with_name(program_file.name + '.ast.json')
    try:
        text = json.dumps(ast_to_obj(program), ensure_ascii=False, indent=2)
    except RecursionError:
        print(f"Error: {program_file} nests too deeply to serialize", file=sys.stderr)
        return EX_DATAERR
    with open(out_path, 'w', encoding='utf-8') as out:
        out.write(text)
    print(str(out_path))
    return EX_OK


def run_ast(ast_path: Path, interpreter: Interpreter) -> int:
    source = read_source(ast_path)
    if source is None:
        return EX_NOINPUT
    try:
        program = ast_from_obj(json.loads(source))
    except (ValueError, TypeError, KeyError, RecursionError) as e:
        print(f"Error: {ast_path} is not a valid AST file: {e}", file=sys.stderr)
        return EX_DATAERR
    interpreter.run(program)
    return exit_status(interpreter.reporter)


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(prog='treelox', description="treelox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--no-color', action='store_true', help='print diagnostics without colors')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-e', '--eval', metavar='EXPRESSION', help='evaluate one expression and print its value')
    group.add_argument('--emit-ast', metavar='SCRIPT', help='emit AST JSON for the given script')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='script to run (if omitted, starts the interactive shell)')
    args = parser.parse_args(argv)

    if args.script and (args.eval is not None or args.emit_ast or args.ast):
        parser.error('a script cannot be combined with -e, --emit-ast or --ast')

    reporter = ErrorReporter(color=False if args.no_color else None)

    if args.emit_ast:
        return emit_ast(Path(args.emit_ast), reporter)

    try:
        with Interpreter(debug_level=args.v, reporter=reporter) as interpreter:
            if args.ast:
                return run_ast(Path(args.ast), interpreter)

            if args.eval is not None:
                value = evaluate_expression(args.eval, interpreter)
                if value is None:
                    return exit_status(reporter)
                print(to_string(value))
                return EX_OK

            if args.script:
                source = read_source(Path(args.script))
                if source is None:
                    return EX_NOINPUT
                interpreter.run_source(source)
                return exit_status(reporter)

            Shell(interpreter).cmdloop()
            return EX_OK
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return EX_INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
