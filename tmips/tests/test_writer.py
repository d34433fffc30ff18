# tmips/tests/test_writer.py
import pytest
from tmips.tmips_assembler import TmipsAssembler
from tmips.tmips_writer import (
    format_object_line, format_object, format_error_report, format_output,
    output_path, write_output,
)


@pytest.fixture
def assembler():
    return TmipsAssembler()


def test_object_line_layout():
    assert format_object_line(0, "812A4000") == "0x00000000:\t0x812A4000\n"
    assert format_object_line(26, "FFFFFFFE") == "0x0000001A:\t0xFFFFFFFE\n"


def test_format_object(assembler):
    program = assembler.assemble(".text\nadd $t0,$t1,$t2\n.data\nx: .word -2\n")
    assert format_object(program) == (
        "0x00000000:\t0x812A4000\n"
        "0x00000001:\t0xFFFFFFFE\n"
    )
    assert format_output(program) == format_object(program)


def test_error_report_undefined_symbol(assembler):
    program = assembler.assemble(".text\nj nowhere\n.data\n")
    expected = (
        " 1   .text\n"
        " 2   j nowhere\n"
        " 3   .data\n"
        "\n"
        "Errors detected:\n"
        "\n"
        "  line  2:  Undefined symbol used.\n"
        "\n"
        "\n"
        "Undefined symbol(s):\n"
        "\n"
        "  nowhere\n"
    )
    assert format_error_report(program) == expected
    assert format_output(program) == expected


def test_error_report_duplicate_and_illegal(assembler):
    source = ".text\nfoo: add $t0,$t0,$t0\nfoo: mul $t0\n.data\n"
    report = format_error_report(assembler.assemble(source))
    # duplicates are listed only in their own section
    assert "  line  3:  Illegal opcode.\n" in report
    assert "Multiply defined symbol(s):\n\n  foo\n" in report
    assert "Multiply" not in report.split("Errors detected:")[1].split("\n\n")[1]
    assert "Undefined symbol(s)" not in report


def test_output_path():
    assert output_path("prog.asm", has_errors=False).name == "prog.obj"
    assert output_path("dir/prog.asm", has_errors=True).name == "prog.err"
    assert output_path("noext", has_errors=False).name == "noext.obj"


def test_write_output_object(assembler, tmp_path):
    source = tmp_path / "good.asm"
    program = assembler.assemble(".text\nadd $t0,$t1,$t2\n.data\n")
    path = write_output(program, source)
    assert path == tmp_path / "good.obj"
    assert path.read_text(encoding="utf-8") == "0x00000000:\t0x812A4000\n"
    assert not (tmp_path / "good.err").exists()


def test_write_output_errors(assembler, tmp_path):
    source = tmp_path / "bad.asm"
    program = assembler.assemble(".text\nj nowhere\n.data\n")
    path = write_output(program, source)
    assert path == tmp_path / "bad.err"
    assert path.read_text(encoding="utf-8").startswith(" 1   .text\n")
