# tmips/tmips_lexer.py
import re
import logging
from tmips.tmips_consts import (
    COMMENT_CHAR, LABEL_SUFFIX, OPERAND_SEPARATOR, COUNT_SEPARATOR,
    SECTION_PREAMBLE, SECTION_TEXT, SECTION_DATA, TEXT_MARKER, DATA_MARKER,
    REGISTER_ZERO, REGISTER_BANKS,
)

logger = logging.getLogger(__name__)

LABEL_RE = re.compile(r'^([^\s:]+):\s*(.*)$')
REGISTER_RE = re.compile(r'^\$([a-z])(\d+)$')
MEMORY_RE = re.compile(r'^\s*([^()\s]*)\s*\(\s*([^()\s]+)\s*\)\s*$')


class Statement:
    """One classified source line: optional label, opcode/directive and raw operand strings."""

    def __init__(self, line_num, original_text, section, label=None, opcode=None, operands=None):
        self.line_num = line_num
        self.original_text = original_text
        self.section = section
        self.label = label
        self.opcode = opcode
        self.operands = operands or []

    @property
    def is_label_only(self):
        return self.opcode is None

    def __repr__(self):
        return (f"Statement(line={self.line_num}, section={self.section!r}, label={self.label!r}, "
                f"opcode={self.opcode!r}, operands={self.operands!r})")


def is_blank(line):
    return not line.strip()


def is_comment(line):
    """True if the first non-whitespace character is the comment marker."""
    return line.lstrip().startswith(COMMENT_CHAR)


def strip_comment(line):
    """Removes everything from the comment marker to the end of the line, then trims."""
    return line.split(COMMENT_CHAR, 1)[0].strip()


def split_label(text):
    """Returns (label, rest) if text starts with 'name:', else (None, text)."""
    match = LABEL_RE.match(text.strip())
    if not match:
        return None, text.strip()
    return match.group(1), match.group(2).strip()


def split_opcode(text):
    """Splits 'opcode operands...' at the first run of whitespace."""
    parts = re.split(r'\s+', text.strip(), maxsplit=1)
    if not parts or not parts[0]:
        return None, ""
    return parts[0], (parts[1] if len(parts) > 1 else "")


def split_operands(operands_str):
    """Splits the operand text on commas, trimming each piece. Empty text gives []."""
    if not operands_str.strip():
        return []
    return [op.strip() for op in operands_str.split(OPERAND_SEPARATOR)]


def parse_register(reg_str):
    """Converts $0, $tN or $sN to a register number. Returns None for any other spelling."""
    if reg_str is None:
        return None
    reg_str = reg_str.strip()
    if reg_str == REGISTER_ZERO:
        return 0
    match = REGISTER_RE.match(reg_str)
    if not match:
        return None
    bank = REGISTER_BANKS.get(match.group(1))
    if bank is None:
        return None
    base, size = bank
    index = int(match.group(2))
    if index >= size:
        return None
    return base + index


def parse_memory_operand(operand_str):
    """Parses 'offset(base)' or '(base)'. Returns (offset_text, base_text) or (None, None)."""
    match = MEMORY_RE.match(operand_str or "")
    if not match:
        return None, None
    offset = match.group(1) or "0"
    return offset, match.group(2)


def lookahead_address_token(line):
    """
    Pulls the address literal out of the line that follows an 'la'.

    The line is read as '[label:] opcode operand ...'; the first operand token is the
    address. A '.word value:count' style suffix is dropped. Returns None if missing.
    """
    if line is None:
        return None
    tokens = strip_comment(line).replace(OPERAND_SEPARATOR, ' ').split()
    if tokens and tokens[0].endswith(LABEL_SUFFIX):
        tokens = tokens[1:]
    if len(tokens) < 2:
        return None
    return tokens[1].split(COUNT_SEPARATOR, 1)[0]


class LineClassifier:
    """
    Turns raw source lines into Statements while tracking the current section.

    Lines before '.text' are discarded. '.text' and '.data' marker lines switch the
    section and produce nothing. Blank and comment lines produce nothing.
    """

    def __init__(self):
        self.section = SECTION_PREAMBLE

    def reset(self):
        self.section = SECTION_PREAMBLE

    def classify(self, line, line_num):
        """Returns a Statement for the line, or None if it produces no statement."""
        if is_blank(line) or is_comment(line):
            return None
        content = strip_comment(line)

        if self.section == SECTION_PREAMBLE:
            if TEXT_MARKER in content:
                self.section = SECTION_TEXT
                logger.debug(f"Line {line_num}: entering .text")
            return None

        if self.section == SECTION_TEXT and DATA_MARKER in content:
            self.section = SECTION_DATA
            logger.debug(f"Line {line_num}: entering .data")
            return None

        label, rest = split_label(content)
        opcode, operands_str = split_opcode(rest)
        statement = Statement(
            line_num=line_num,
            original_text=line.rstrip('\n'),
            section=self.section,
            label=label,
            opcode=opcode,
            operands=split_operands(operands_str),
        )
        logger.debug(f"Line {line_num}: {statement}")
        return statement
