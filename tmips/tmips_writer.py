# tmips/tmips_writer.py
import logging
from pathlib import Path
from tmips.tmips_consts import (
    DIAGNOSTIC_MESSAGES, ERR_DUPLICATE_SYMBOL, ERR_UNDEFINED_SYMBOL,
    OBJECT_SUFFIX, ERROR_SUFFIX,
)
from tmips.tmips_codec import address_to_hex16

logger = logging.getLogger(__name__)


def format_object_line(address, word_hex):
    return f"0x0000{address_to_hex16(address)}:\t0x{word_hex}\n"


def format_object(program):
    """Object listing: one 'address: word' line per word, in program order."""
    return ''.join(format_object_line(address, word) for address, word in program.words())


def format_error_report(program):
    """Numbered source listing followed by the error summary and symbol sections."""
    out = [f"{num:2d}   {line}\n" for num, line in enumerate(program.source_lines, start=1)]
    out.append("\n")
    out.append("Errors detected:\n\n")
    for diag in program.diagnostics:
        if diag.kind == ERR_DUPLICATE_SYMBOL:
            continue  # listed in its own section below
        message = DIAGNOSTIC_MESSAGES.get(diag.kind, diag.kind)
        out.append(f"  line {diag.line_num:2d}:  {message}\n")
    out.append("\n")

    duplicates = program.diagnostics.symbols_of(ERR_DUPLICATE_SYMBOL)
    if duplicates:
        out.append("Multiply defined symbol(s):\n\n")
        out.extend(f"  {name}\n" for name in duplicates)
    out.append("\n")

    undefined = program.diagnostics.symbols_of(ERR_UNDEFINED_SYMBOL)
    if undefined:
        out.append("Undefined symbol(s):\n\n")
        out.extend(f"  {name}\n" for name in undefined)
    return ''.join(out)


def format_output(program):
    """The text that would be written: error report if anything went wrong, else the object listing."""
    return format_error_report(program) if program.has_errors else format_object(program)


def output_path(source_path, has_errors):
    """Source path with its extension replaced by .err or .obj."""
    return Path(source_path).with_suffix(ERROR_SUFFIX if has_errors else OBJECT_SUFFIX)


def write_output(program, source_path):
    """Writes the .obj or .err file next to the source. Returns the path written."""
    path = output_path(source_path, program.has_errors)
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_output(program))
    logger.info(f"Wrote {'error report' if program.has_errors else 'object file'} to {path}")
    return path
