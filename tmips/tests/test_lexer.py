# tmips/tests/test_lexer.py
import pytest
from tmips.tmips_lexer import (
    is_blank, is_comment, strip_comment, split_label, split_opcode, split_operands,
    parse_register, parse_memory_operand, lookahead_address_token, LineClassifier,
)
from tmips.tmips_consts import SECTION_PREAMBLE, SECTION_TEXT, SECTION_DATA

# --- Line helpers ---

@pytest.mark.parametrize("line, expected", [
    ("", True),
    ("   \t  \n", True),
    ("  add", False),
])
def test_is_blank(line, expected):
    assert is_blank(line) == expected


@pytest.mark.parametrize("line, expected", [
    ("# full comment", True),
    ("   \t# indented comment", True),
    ("add $t0,$t0,$t0 # trailing", False),
    ("", False),
])
def test_is_comment(line, expected):
    assert is_comment(line) == expected


@pytest.mark.parametrize("line, expected", [
    ("add $t0,$t1,$t2 # comment", "add $t0,$t1,$t2"),
    ("   add $t0,$t1,$t2   \n", "add $t0,$t1,$t2"),
    ("# only a comment", ""),
    ("", ""),
])
def test_strip_comment(line, expected):
    assert strip_comment(line) == expected


@pytest.mark.parametrize("text, label, rest", [
    ("loop: add $t0,$t0,$t0", "loop", "add $t0,$t0,$t0"),
    ("loop:\tadd $t0,$t0,$t0", "loop", "add $t0,$t0,$t0"),
    ("loop:add $t0,$t0,$t0", "loop", "add $t0,$t0,$t0"),
    ("done:", "done", ""),
    ("vals: .word 5:3", "vals", ".word 5:3"),
    (".word 5:3", None, ".word 5:3"),
    ("add $t0,$t0,$t0", None, "add $t0,$t0,$t0"),
])
def test_split_label(text, label, rest):
    assert split_label(text) == (label, rest)


def test_split_opcode():
    assert split_opcode("add  $t0, $t1, $t2") == ("add", "$t0, $t1, $t2")
    assert split_opcode("j") == ("j", "")
    assert split_opcode("") == (None, "")


@pytest.mark.parametrize("text, expected", [
    ("$t0,$t1,$t2", ["$t0", "$t1", "$t2"]),
    (" $t0 , $t1 ,$t2 ", ["$t0", "$t1", "$t2"]),
    ("$t0, 4($s0)", ["$t0", "4($s0)"]),
    ("loop", ["loop"]),
    ("", []),
])
def test_split_operands(text, expected):
    assert split_operands(text) == expected

# --- Registers ---

@pytest.mark.parametrize("reg, expected", [
    ("$0", 0),
    ("$t0", 8),
    ("$t7", 15),
    ("$s0", 16),
    ("$s7", 23),
    (" $t2 ", 10),
    ("$t8", None),
    ("$s8", None),
    ("$zero", None),
    ("$x1", None),
    ("t0", None),
    ("$1", None),
    ("", None),
    (None, None),
])
def test_parse_register(reg, expected):
    assert parse_register(reg) == expected

# --- Memory operands ---

@pytest.mark.parametrize("operand, expected", [
    ("4($s0)", ("4", "$s0")),
    ("-8( $t1 )", ("-8", "$t1")),
    ("($t0)", ("0", "$t0")),
    ("4$s0", (None, None)),
    ("", (None, None)),
])
def test_parse_memory_operand(operand, expected):
    assert parse_memory_operand(operand) == expected

# --- la lookahead ---

@pytest.mark.parametrize("line, expected", [
    ("value: .word 65536", "65536"),
    ("value: .word 65536:2", "65536"),
    ("value:\t.word 12   # address of value", "12"),
    (".word 12", "12"),
    ("label:", None),
    ("", None),
    (None, None),
])
def test_lookahead_address_token(line, expected):
    assert lookahead_address_token(line) == expected

# --- LineClassifier ---

def test_preamble_lines_are_discarded():
    classifier = LineClassifier()
    assert classifier.classify("add $t0,$t0,$t0", 1) is None
    assert classifier.classify("anything at all", 2) is None
    assert classifier.section == SECTION_PREAMBLE
    assert classifier.classify("   .text", 3) is None
    assert classifier.section == SECTION_TEXT


def test_text_statements():
    classifier = LineClassifier()
    classifier.classify(".text", 1)
    assert classifier.classify("", 2) is None
    assert classifier.classify("   # comment", 3) is None

    stmt = classifier.classify("loop: addi $t0, $t0, -1   # decrement\n", 4)
    assert stmt.line_num == 4
    assert stmt.section == SECTION_TEXT
    assert stmt.label == "loop"
    assert stmt.opcode == "addi"
    assert stmt.operands == ["$t0", "$t0", "-1"]
    assert stmt.original_text == "loop: addi $t0, $t0, -1   # decrement"

    label_only = classifier.classify("done:", 5)
    assert label_only.label == "done"
    assert label_only.is_label_only


def test_data_marker_switches_section():
    classifier = LineClassifier()
    classifier.classify(".text", 1)
    assert classifier.classify(".data", 2) is None
    assert classifier.section == SECTION_DATA

    stmt = classifier.classify("vals: .word 7:2", 3)
    assert stmt.section == SECTION_DATA
    assert stmt.label == "vals"
    assert stmt.opcode == ".word"
    assert stmt.operands == ["7:2"]

    stmt = classifier.classify(".resw 4", 4)
    assert stmt.label is None
    assert stmt.opcode == ".resw"
    assert stmt.operands == ["4"]


def test_marker_inside_comment_does_not_switch():
    classifier = LineClassifier()
    classifier.classify(".text", 1)
    stmt = classifier.classify("add $t0,$t0,$t0  # .data follows later", 2)
    assert stmt.opcode == "add"
    assert classifier.section == SECTION_TEXT


def test_reset():
    classifier = LineClassifier()
    classifier.classify(".text", 1)
    classifier.reset()
    assert classifier.section == SECTION_PREAMBLE
