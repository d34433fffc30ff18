# tmips/tmips_assembler.py
import logging
from tmips.tmips_consts import (
    HASH_SIZE, OPCODE_TABLE, PSEUDO, SECTION_TEXT,
    ERR_DUPLICATE_SYMBOL, ERR_INTERNAL,
)
from tmips.tmips_codec import address_to_hex16
from tmips.tmips_symtab import SymbolTable, DuplicateSymbolError
from tmips.tmips_diagnostics import DiagnosticsCollector
from tmips.tmips_lexer import LineClassifier
from tmips.tmips_encoder import InstructionEncoder

logger = logging.getLogger(__name__)


class Program:
    """Result of one assembly run, handed read-only to the writers."""

    def __init__(self, source_lines, symbol_table, instructions, data, diagnostics):
        self.source_lines = source_lines
        self.symbol_table = symbol_table
        self.instructions = instructions
        self.data = data
        self.diagnostics = diagnostics

    @property
    def has_errors(self):
        return not self.diagnostics.is_empty()

    def words(self):
        """Yields (address, hex word) for every assembled word, instructions first."""
        for entry in self.instructions:
            if entry.is_assembled:
                yield entry.address, entry.hex
        for entry in self.data:
            yield entry.address, entry.hex

    def to_dict(self):
        return {
            "object": [
                {"address": f"0x0000{address_to_hex16(address)}", "word": f"0x{word}"}
                for address, word in self.words()
            ],
            "errors": self.diagnostics.to_list(),
            "symbols": self.symbol_table.to_dict(),
        }


class TmipsAssembler:
    def __init__(self, hash_size=HASH_SIZE):
        self.hash_size = hash_size
        self._reset()

    def _reset(self):
        self.symbol_table = SymbolTable(self.hash_size)
        self.diagnostics = DiagnosticsCollector()
        self.classifier = LineClassifier()
        self.encoder = InstructionEncoder(self.diagnostics)
        self.instructions = []
        self.data = []
        self.current_address = 0  # word address shared by instructions and data

    def _define_label(self, statement):
        """Adds a label at the current address; a redefinition keeps the first address."""
        try:
            self.symbol_table.insert(statement.label, self.current_address)
            logger.debug(f"Pass 1: Label '{statement.label}' defined at word {self.current_address}")
        except DuplicateSymbolError as e:
            logger.debug(f"Pass 1: Duplicate label '{e.name}' on line {statement.line_num} (kept word {e.address})")
            self.diagnostics.add(ERR_DUPLICATE_SYMBOL, statement.line_num, symbol=statement.label,
                                 text=statement.original_text)

    def first_pass(self, lines):
        """ Pass 1: classify lines, build the symbol table and the instruction/data sequences. """
        logger.debug("--- Starting First Pass ---")
        numbered = enumerate(lines, start=1)
        for line_num, line in numbered:
            statement = self.classifier.classify(line, line_num)
            if statement is None:
                continue

            if statement.label:
                self._define_label(statement)
            if statement.is_label_only:
                continue

            if statement.section == SECTION_TEXT:
                lookahead = None
                kind = OPCODE_TABLE.get(statement.opcode, (None,))[0]
                if kind == PSEUDO:
                    # 'la' always consumes the next physical line as its address source
                    following = next(numbered, None)
                    if following is not None:
                        lookahead = following[1]
                        logger.debug(f"Pass 1: line {following[0]} consumed by '{statement.opcode}' on line {line_num}")
                entries = self.encoder.build(statement, self.current_address, lookahead)
                self.instructions.extend(entries)
            else:
                entries = self.encoder.build_data(statement, self.current_address)
                self.data.extend(entries)

            self.current_address += len(entries)
        logger.debug(f"--- First Pass Complete: {len(self.instructions)} instructions, "
                     f"{len(self.data)} data words, {len(self.symbol_table)} symbols ---")

    def second_pass(self):
        """ Pass 2: resolve branch/jump symbols and assemble every instruction word. """
        logger.debug("--- Starting Second Pass ---")
        assembled = 0
        for entry in self.instructions:
            if self.encoder.assemble(entry, self.symbol_table):
                assembled += 1
        logger.debug(f"--- Second Pass Complete: {assembled}/{len(self.instructions)} assembled ---")

    def assemble(self, source_text):
        """ Main method: runs both passes over 'source_text' and returns the Program. """
        logger.info("Starting assembly process...")
        self._reset()
        lines = source_text.splitlines()

        try:
            self.first_pass(lines)
            self.second_pass()
        except Exception as e:
            logger.error(f"Unexpected exception during assembly: {e}", exc_info=True)
            self.diagnostics.add(ERR_INTERNAL, 0, symbol=str(e))

        if self.diagnostics:
            logger.warning(f"Assembly completed with {len(self.diagnostics)} errors.")
        else:
            logger.info("Assembly successful.")

        return Program(lines, self.symbol_table, self.instructions, self.data, self.diagnostics)
