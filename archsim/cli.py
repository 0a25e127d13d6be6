#!/usr/bin/env python3
"""
archsim - command-line front end

Usage:
    archsim <program.s> [--registers 12] [--memory 1024] [--trace]
                        [--dump-memory N] [--verbose] [--log-file PATH]
    archsim --list-isa

Reads the program from a file, or from stdin when the path is '-' or
omitted, runs it on the sample mov/add/sub ISA, and prints the final
register file. Exit status is the exec() status (0 = success).

Examples:
    archsim prog.s --trace
    printf 'mov 3, r[0]\\nadd r[0], 4, r[1]\\n' | archsim --registers 2
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from . import __version__
from .isa import default_isa
from .log_setup import setup_logging
from .processor import Processor

DEFAULT_REGISTERS = 12
DEFAULT_MEMORY = 1024

log = logging.getLogger('archsim.cli')


def positive_int(value: str) -> int:
    """argparse type: integer > 0 (decimal or 0x hex)."""
    try:
        n = int(value.strip(), 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archsim",
        description="ISA-driven instruction set simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("program", nargs="?", default="-",
                        help="Program file ('-' or omitted: read stdin)")
    parser.add_argument("--registers", "-r", type=positive_int, default=DEFAULT_REGISTERS,
                        help=f"Register count (default: {DEFAULT_REGISTERS})")
    parser.add_argument("--memory", "-m", type=positive_int, default=DEFAULT_MEMORY,
                        help=f"Memory size in cells (default: {DEFAULT_MEMORY})")
    parser.add_argument("--trace", action="store_true",
                        help="Print each instruction as it completes")
    parser.add_argument("--dump-memory", type=int, default=0, metavar="N",
                        help="Print the first N memory cells after a successful run")
    parser.add_argument("--list-isa", action="store_true",
                        help="Print the instruction set and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    parser.add_argument("--log-file", type=str,
                        help="Write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"archsim {__version__}")
    return parser


def read_program(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def register_table(registers) -> Table:
    table = Table(title="Registers")
    table.add_column("Register", style="cyan")
    table.add_column("Value", justify="right")
    for reg in registers:
        table.add_row(f"r[{reg.index}]", str(reg.read()))
    return table


def isa_table(isa) -> Table:
    table = Table(title="Instruction Set")
    table.add_column("Mnemonic", style="cyan")
    table.add_column("Syntax")
    table.add_column("Description")
    for desc in isa:
        syntax = "\n".join(', '.join(roles) for roles in desc.roles)
        table.add_row(desc.mnemonic, syntax, desc.description)
    return table


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    levels = {0: logging.WARNING, 1: logging.INFO}
    setup_logging(console_level=levels.get(args.verbose, logging.DEBUG),
                  log_file=args.log_file)

    out = Console(highlight=False, markup=False)
    err = Console(stderr=True, highlight=False, markup=False)

    proc = Processor(default_isa, args.registers, args.memory)

    if args.list_isa:
        out.print(isa_table(proc.isa))
        return 0

    try:
        source = read_program(args.program)
    except FileNotFoundError:
        err.print(f"Error: File not found: {args.program}")
        return 1
    except OSError as e:
        err.print(f"Error reading {args.program}: {e}")
        return 1

    def on_error(message):
        err.print(f"Error: {message}")

    def on_instruction_complete(instr, registers, memory):
        dest = instr.dest
        out.print(f"{instr.line_num:04d}: {instr}  ->  {dest} = "
                  f"{registers[dest.index].read()}")

    def on_program_complete(registers, memory):
        out.print(register_table(registers))
        if args.dump_memory > 0:
            out.print(memory.dump(0, min(args.dump_memory, len(memory))))

    proc.on_error = on_error
    proc.on_program_complete = on_program_complete
    if args.trace:
        proc.on_instruction_complete = on_instruction_complete

    status = proc.load(source).exec()
    log.info("exit status %d", status)
    return int(status)


if __name__ == "__main__":
    sys.exit(main())
