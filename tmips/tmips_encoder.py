# tmips/tmips_encoder.py
import logging
from tmips.tmips_consts import (
    OPCODE_TABLE, RTYPE, ITYPE, JTYPE, PSEUDO, UNSIGNED_IMMEDIATE_OPCODES,
    REG_BITS, SHIFT_BITS, IMM_BITS, WORD_BITS, R_TYPE_FUNCT_BITS,
    IMM_MIN, IMM_MAX, UIMM_MAX, ADDRESS_MAX, WORD_MIN, WORD_MAX,
    DIRECTIVE_WORD, DIRECTIVES, COUNT_SEPARATOR, SECTION_DATA,
    ERR_ILLEGAL_OPCODE, ERR_UNDEFINED_SYMBOL, ERR_MALFORMED_LITERAL,
    ERR_INVALID_REGISTER, ERR_OUT_OF_RANGE, ERR_OPERAND_COUNT,
)
from tmips.tmips_codec import (
    parse_int, encode_fixed, decode_fixed, extract_bit_range, bits_to_hex,
)
from tmips.tmips_lexer import parse_register, parse_memory_operand, lookahead_address_token

logger = logging.getLogger(__name__)


class InstructionEntry:
    """One instruction word. bits/hex stay None until pass 2 assembles it."""

    def __init__(self, kind, address, line_num, opcode_name, opcode_bits, label=None,
                 rs1=0, rs2=0, rt=0, shift=0, immediate=0, symbol=None, source_text=""):
        self.kind = kind
        self.address = address
        self.line_num = line_num
        self.opcode_name = opcode_name
        self.opcode_bits = opcode_bits
        self.label = label
        self.rs1 = rs1
        self.rs2 = rs2
        self.rt = rt
        self.shift = shift
        self.immediate = immediate
        self.symbol = symbol  # branch/jump target, resolved in pass 2
        self.source_text = source_text
        self.bits = None
        self.hex = None

    @property
    def is_assembled(self):
        return self.bits is not None

    @property
    def needs_symbol(self):
        return self.symbol is not None

    def __repr__(self):
        return (f"InstructionEntry({self.kind}, {self.opcode_name!r}, address={self.address}, "
                f"line={self.line_num}, hex={self.hex!r})")


class DataEntry:
    """One 32-bit data word from .word or .resw. Encoded as soon as it is created."""

    def __init__(self, address, line_num, label, raw_value, source_text=""):
        self.address = address
        self.line_num = line_num
        self.label = label
        self.raw_value = raw_value
        self.source_text = source_text
        self.bits = encode_fixed(raw_value, WORD_BITS)
        self.hex = bits_to_hex(self.bits)

    def __repr__(self):
        return f"DataEntry(address={self.address}, value={self.raw_value}, hex={self.hex!r})"


class InstructionEncoder:
    """
    Builds InstructionEntry/DataEntry rows from classified statements (pass 1) and
    assembles instruction words (pass 2). Problems are reported to the diagnostics
    collector; a statement with any problem produces no rows.
    """

    def __init__(self, diagnostics):
        self.diagnostics = diagnostics

    # --- Operand helpers (report and return None on error) ---

    def _report(self, kind, statement, symbol=None, opcode=None):
        self.diagnostics.add(kind, statement.line_num, symbol=symbol, opcode=opcode,
                             text=statement.original_text)

    def _register(self, reg_str, statement):
        reg = parse_register(reg_str)
        if reg is None:
            self._report(ERR_INVALID_REGISTER, statement, symbol=reg_str)
        return reg

    def _literal(self, text, statement, low, high):
        value = parse_int(text)
        if value is None:
            self._report(ERR_MALFORMED_LITERAL, statement, symbol=text)
            return None
        if not (low <= value <= high):
            self._report(ERR_OUT_OF_RANGE, statement, symbol=text)
            return None
        return value

    def _immediate(self, imm_str, statement):
        high = UIMM_MAX if statement.opcode in UNSIGNED_IMMEDIATE_OPCODES else IMM_MAX
        return self._literal(imm_str, statement, IMM_MIN, high)

    def _parse_operands(self, statement, formats):
        """Maps each operand to its field. Returns a dict of fields or None on error."""
        operands = statement.operands
        if len(operands) != len(formats):
            self._report(ERR_OPERAND_COUNT, statement, opcode=statement.opcode)
            return None

        fields = {}
        for op_type, op_str in zip(formats, operands):
            if op_type in ("rt", "rs1", "rs2"):
                value = self._register(op_str, statement)
            elif op_type == "shift":
                value = self._literal(op_str, statement, 0, (1 << SHIFT_BITS) - 1)
            elif op_type == "imm":
                value = self._immediate(op_str, statement)
            elif op_type == "mem":
                offset_str, base_str = parse_memory_operand(op_str)
                if base_str is None:
                    self._report(ERR_MALFORMED_LITERAL, statement, symbol=op_str)
                    return None
                base = self._register(base_str, statement)
                offset = self._immediate(offset_str, statement)
                if base is None or offset is None:
                    return None
                fields["rs1"] = base
                fields["imm"] = offset
                continue
            elif op_type == "symbol":
                value = op_str if op_str else None
                if value is None:
                    self._report(ERR_OPERAND_COUNT, statement, opcode=statement.opcode)
            else:
                raise ValueError(f"Unknown operand format '{op_type}' for '{statement.opcode}'")
            if value is None:
                return None
            fields[op_type] = value
        return fields

    # --- Pass 1: statements -> entries ---

    def build(self, statement, address, lookahead_line=None):
        """
        Builds the instruction entries for a text-section statement starting at 'address'.
        Returns a list (two entries for 'la', empty on any error).
        """
        opcode = statement.opcode
        if opcode not in OPCODE_TABLE:
            self._report(ERR_ILLEGAL_OPCODE, statement, opcode=opcode)
            return []

        kind, opcode_bits, formats = OPCODE_TABLE[opcode]
        fields = self._parse_operands(statement, formats)
        if fields is None:
            return []

        words = 2 if kind == PSEUDO else 1
        if words > self._room(address):
            self._report(ERR_OUT_OF_RANGE, statement, opcode=opcode)
            return []

        if kind == PSEUDO:
            return self._expand_la(statement, address, fields, lookahead_line)

        entry = InstructionEntry(
            kind=kind,
            address=address,
            line_num=statement.line_num,
            opcode_name=opcode,
            opcode_bits=opcode_bits,
            label=statement.label,
            rs1=fields.get("rs1", 0),
            rs2=fields.get("rs2", 0),
            rt=fields.get("rt", 0),
            shift=fields.get("shift", 0),
            immediate=fields.get("imm", 0),
            symbol=fields.get("symbol"),
            source_text=statement.original_text,
        )
        logger.debug(f"Pass 1: {kind}-type '{opcode}' at word {address} (line {statement.line_num})")
        return [entry]

    def _expand_la(self, statement, address, fields, lookahead_line):
        """
        la rt, symbol -> lui rt, high16 ; ori rt, rt, low16

        The address comes from the first operand of the line after the 'la', which the
        caller has already consumed and passes in as 'lookahead_line'.
        """
        token = lookahead_address_token(lookahead_line)
        if token is None:
            self._report(ERR_MALFORMED_LITERAL, statement, symbol=fields.get("symbol"))
            return []
        target = self._literal(token, statement, WORD_MIN, WORD_MAX)
        if target is None:
            return []

        target_bits = encode_fixed(target, WORD_BITS)
        high = decode_fixed(extract_bit_range(target_bits, 31, 16), signed=False)
        low = decode_fixed(extract_bit_range(target_bits, 15, 0), signed=False)
        rt = fields["rt"]
        lui_bits = OPCODE_TABLE["lui"][1]
        ori_bits = OPCODE_TABLE["ori"][1]
        logger.debug(f"Pass 1: la '{fields['symbol']}' -> {target} (hi=0x{high:04x}, lo=0x{low:04x})")

        return [
            InstructionEntry(ITYPE, address, statement.line_num, "lui", lui_bits,
                             label=statement.label, rt=rt, immediate=high,
                             source_text=statement.original_text),
            InstructionEntry(ITYPE, address + 1, statement.line_num, "ori", ori_bits,
                             rs1=rt, rt=rt, immediate=low,
                             source_text=statement.original_text),
        ]

    def build_data(self, statement, address):
        """Expands a .word/.resw statement into DataEntry rows starting at 'address'."""
        directive = statement.opcode
        if statement.section != SECTION_DATA or directive not in DIRECTIVES:
            self._report(ERR_ILLEGAL_OPCODE, statement, opcode=directive)
            return []
        if len(statement.operands) != 1:
            self._report(ERR_OPERAND_COUNT, statement, opcode=directive)
            return []

        arg = statement.operands[0]
        if directive == DIRECTIVE_WORD:
            value_str, _, count_str = arg.partition(COUNT_SEPARATOR)
            value = self._literal(value_str, statement, WORD_MIN, WORD_MAX)
            if value is None:
                return []
            count = self._count(count_str if count_str else "1", statement, address)
        else:
            value = 0
            count = self._count(arg, statement, address)
        if count is None:
            return []

        rows = []
        for i in range(count):
            # the label belongs to the first row only
            label = statement.label if i == 0 else None
            rows.append(DataEntry(address + i, statement.line_num, label, value,
                                  source_text=statement.original_text))
        logger.debug(f"Pass 1: {directive} x{count} (value {value}) at word {address} (line {statement.line_num})")
        return rows

    def _room(self, address):
        """Words left before the address space runs out."""
        return ADDRESS_MAX + 1 - address

    def _count(self, count_str, statement, address):
        count = parse_int(count_str)
        if count is None:
            self._report(ERR_MALFORMED_LITERAL, statement, symbol=count_str)
            return None
        # the rows must fit in the remaining address space
        if count < 0 or count > self._room(address):
            self._report(ERR_OUT_OF_RANGE, statement, symbol=count_str)
            return None
        return count

    # --- Pass 2: entries -> words ---

    def assemble(self, entry, symbol_table):
        """Resolves any symbol and fills entry.bits/hex. Returns False if left unassembled."""
        if entry.needs_symbol:
            target = symbol_table.lookup(entry.symbol)
            if target is None:
                self.diagnostics.add(ERR_UNDEFINED_SYMBOL, entry.line_num, symbol=entry.symbol,
                                     text=entry.source_text)
                logger.debug(f"Pass 2: undefined symbol '{entry.symbol}' (line {entry.line_num})")
                return False
            if target > ADDRESS_MAX:
                self.diagnostics.add(ERR_OUT_OF_RANGE, entry.line_num, symbol=entry.symbol,
                                     text=entry.source_text)
                return False
            entry.immediate = target

        if entry.kind == RTYPE:
            bits = (entry.opcode_bits
                    + encode_fixed(entry.rs1, REG_BITS)
                    + encode_fixed(entry.rs2, REG_BITS)
                    + encode_fixed(entry.rt, REG_BITS)
                    + encode_fixed(entry.shift, SHIFT_BITS)
                    + R_TYPE_FUNCT_BITS)
        elif entry.kind == ITYPE:
            bits = (entry.opcode_bits
                    + encode_fixed(entry.rs1, REG_BITS)
                    + encode_fixed(entry.rt, REG_BITS)
                    + encode_fixed(entry.immediate, IMM_BITS))
        elif entry.kind == JTYPE:
            bits = (entry.opcode_bits
                    + encode_fixed(0, REG_BITS)
                    + encode_fixed(0, REG_BITS)
                    + encode_fixed(entry.immediate, IMM_BITS))
        else:
            raise ValueError(f"Unknown instruction kind '{entry.kind}' for '{entry.opcode_name}'")

        entry.bits = bits
        entry.hex = bits_to_hex(bits)
        logger.debug(f"Pass 2: word {entry.address} '{entry.opcode_name}' -> {bits} (0x{entry.hex})")
        return True
