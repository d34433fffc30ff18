# tmips/tmips_diagnostics.py
import bisect
import logging
from tmips.tmips_consts import DIAGNOSTIC_MESSAGES, ERR_DUPLICATE_SYMBOL

logger = logging.getLogger(__name__)


class Diagnostic:
    """One assembly error: kind, source line and the symbol/opcode involved."""

    def __init__(self, kind, line_num, symbol=None, opcode=None, text=""):
        self.kind = kind
        self.line_num = line_num
        self.symbol = symbol
        self.opcode = opcode
        self.text = text  # original source text, for API consumers

    @property
    def message(self):
        if self.kind == ERR_DUPLICATE_SYMBOL:
            return f"Multiply defined symbol: '{self.symbol}'"
        message = DIAGNOSTIC_MESSAGES.get(self.kind, self.kind)
        if self.symbol:
            message = f"{message.rstrip('.')}: '{self.symbol}'"
        elif self.opcode:
            message = f"{message.rstrip('.')}: '{self.opcode}'"
        return message

    def to_dict(self):
        return {
            "kind": self.kind,
            "line": self.line_num,
            "symbol": self.symbol,
            "opcode": self.opcode,
            "message": self.message,
            "text": self.text,
        }

    def __eq__(self, other):
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return (self.kind, self.line_num, self.symbol, self.opcode) == \
               (other.kind, other.line_num, other.symbol, other.opcode)

    def __repr__(self):
        return f"Diagnostic({self.kind!r}, line={self.line_num}, symbol={self.symbol!r}, opcode={self.opcode!r})"


class DiagnosticsCollector:
    """Keeps diagnostics ordered by source line; equal lines keep insertion order."""

    def __init__(self):
        self._diagnostics = []
        self._lines = []  # parallel list of line numbers for bisect

    def report(self, diag):
        # bisect_right places a new entry after any existing ones on the same line
        index = bisect.bisect_right(self._lines, diag.line_num)
        self._lines.insert(index, diag.line_num)
        self._diagnostics.insert(index, diag)
        logger.debug(f"Diagnostic at line {diag.line_num}: {diag.kind} (symbol={diag.symbol}, opcode={diag.opcode})")

    def add(self, kind, line_num, symbol=None, opcode=None, text=""):
        """Builds and reports a Diagnostic. Returns it for convenience."""
        diag = Diagnostic(kind, line_num, symbol=symbol, opcode=opcode, text=text)
        self.report(diag)
        return diag

    def is_empty(self):
        return not self._diagnostics

    def of_kind(self, kind):
        return [d for d in self._diagnostics if d.kind == kind]

    def symbols_of(self, kind):
        """Symbol names of every diagnostic of 'kind', in line order."""
        return [d.symbol for d in self._diagnostics if d.kind == kind]

    def to_list(self):
        return [d.to_dict() for d in self._diagnostics]

    def __iter__(self):
        return iter(list(self._diagnostics))

    def __len__(self):
        return len(self._diagnostics)

    def __bool__(self):
        return bool(self._diagnostics)
