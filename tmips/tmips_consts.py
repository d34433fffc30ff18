# tmips/tmips_consts.py

# --- Field widths (bits) ---
OPCODE_BITS = 6
REG_BITS = 5
SHIFT_BITS = 5
FUNCT_BITS = 6
IMM_BITS = 16
WORD_BITS = 32

# R-type function field is fixed to zero for every TMIPS R-type instruction
R_TYPE_FUNCT_BITS = "0" * FUNCT_BITS

# --- Register spelling ---
# $0 is always register 0, $tN -> 8+N, $sN -> 16+N
REGISTER_ZERO = "$0"
REGISTER_BANKS = {
    "t": (8, 8),   # prefix: (base register, bank size)
    "s": (16, 8),
}

# --- Instruction kinds ---
RTYPE = "R"
ITYPE = "I"
JTYPE = "J"
PSEUDO = "pseudo"

# --- Opcode table ---
# mnemonic -> (kind, opcode bits, operand format)
# Operand format names the role of each comma separated operand:
#   rt/rs1/rs2 : registers
#   shift      : 5-bit shift amount
#   imm        : 16-bit immediate
#   mem        : offset(base) memory operand -> imm + rs1
#   symbol     : label resolved in pass 2
OPCODE_TABLE = {
    "add":  (RTYPE, "100000", ["rt", "rs1", "rs2"]),
    "nor":  (RTYPE, "100111", ["rt", "rs1", "rs2"]),
    "sll":  (RTYPE, "000000", ["rt", "rs1", "shift"]),
    "addi": (ITYPE, "001000", ["rt", "rs1", "imm"]),
    "ori":  (ITYPE, "001101", ["rt", "rs1", "imm"]),
    "lui":  (ITYPE, "001111", ["rt", "imm"]),
    "sw":   (ITYPE, "101011", ["rt", "mem"]),
    "lw":   (ITYPE, "100011", ["rt", "mem"]),
    "bne":  (ITYPE, "000110", ["rt", "rs1", "symbol"]),
    "j":    (JTYPE, "000010", ["symbol"]),
    # la rt, symbol -> lui rt, high16 ; ori rt, rt, low16
    "la":   (PSEUDO, None, ["rt", "symbol"]),
}

# Immediates that are interpreted as 16-bit patterns rather than signed values
UNSIGNED_IMMEDIATE_OPCODES = {"ori", "lui"}

# Signed range for arithmetic/memory immediates
IMM_MIN = -(1 << (IMM_BITS - 1))
IMM_MAX = (1 << (IMM_BITS - 1)) - 1
# Logical immediates accept any value with a 16-bit pattern
UIMM_MAX = (1 << IMM_BITS) - 1
# Branch/jump targets are word addresses encoded in 16 bits
ADDRESS_MAX = (1 << IMM_BITS) - 1
# Data words accept any value with a 32-bit pattern
WORD_MIN = -(1 << (WORD_BITS - 1))
WORD_MAX = (1 << WORD_BITS) - 1

# --- Source syntax ---
COMMENT_CHAR = "#"
LABEL_SUFFIX = ":"
OPERAND_SEPARATOR = ","
COUNT_SEPARATOR = ":"  # .word value:count

# --- Sections ---
SECTION_PREAMBLE = "preamble"
SECTION_TEXT = "text"
SECTION_DATA = "data"
TEXT_MARKER = ".text"
DATA_MARKER = ".data"

# --- Data directives ---
DIRECTIVE_WORD = ".word"
DIRECTIVE_RESW = ".resw"
DIRECTIVES = {DIRECTIVE_WORD, DIRECTIVE_RESW}

# --- Symbol table ---
HASH_SIZE = 13
HASH_BASE = 127

# --- Diagnostic kinds ---
ERR_ILLEGAL_OPCODE = "IllegalOpcode"
ERR_UNDEFINED_SYMBOL = "UndefinedSymbol"
ERR_DUPLICATE_SYMBOL = "DuplicateSymbol"
ERR_MALFORMED_LITERAL = "MalformedLiteral"
ERR_INVALID_REGISTER = "InvalidRegister"
ERR_OUT_OF_RANGE = "OperandOutOfRange"
ERR_OPERAND_COUNT = "WrongOperandCount"
ERR_INTERNAL = "InternalError"

# Report text for the "Errors detected:" listing.
# Duplicate symbols are only reported in their own section.
DIAGNOSTIC_MESSAGES = {
    ERR_ILLEGAL_OPCODE: "Illegal opcode.",
    ERR_UNDEFINED_SYMBOL: "Undefined symbol used.",
    ERR_MALFORMED_LITERAL: "Malformed numeric literal.",
    ERR_INVALID_REGISTER: "Invalid register.",
    ERR_OUT_OF_RANGE: "Operand out of range.",
    ERR_OPERAND_COUNT: "Wrong number of operands.",
    ERR_INTERNAL: "Internal assembler error.",
}

# --- Output ---
OBJECT_SUFFIX = ".obj"
ERROR_SUFFIX = ".err"
