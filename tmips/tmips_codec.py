# tmips/tmips_codec.py
import re

_INT_RE = re.compile(r'^[+-]?(0[xX][0-9a-fA-F]+|\d+)$')
_BITS_RE = re.compile(r'^[01]+$')


def parse_int(text):
    """Parses a decimal (or 0x-prefixed hex) literal. Returns None if malformed."""
    if text is None:
        return None
    text = text.strip()
    if not _INT_RE.match(text):
        return None
    return int(text, 0) if 'x' in text.lower() else int(text, 10)


def encode_fixed(value, width):
    """
    Converts a signed integer to a fixed-width two's complement bit string.

    Negative values come out as (inverted magnitude + 1) inside the field; bits that
    do not fit in 'width' are dropped. Callers are expected to range-check first.
    """
    if width <= 0:
        raise ValueError(f"Bit width must be positive, got {width}")
    mask = (1 << width) - 1
    # two's complement of a negative value, confined to the field
    return format(value & mask, f"0{width}b")


def decode_fixed(bits, signed=True):
    """Reinterprets a bit string as a two's complement (or unsigned) integer."""
    if not bits or not _BITS_RE.match(bits):
        raise ValueError(f"Invalid bit string: '{bits}'")
    value = int(bits, 2)
    if signed and bits[0] == '1':
        value -= 1 << len(bits)
    return value


def extract_bit_range(bits32, high, low):
    """
    Returns bits [high..low] (bit 0 is the least significant) of a 32-bit string,
    right-justified into a 16-bit field.
    """
    if len(bits32) != 32 or not _BITS_RE.match(bits32):
        raise ValueError(f"Expected a 32-bit string, got '{bits32}'")
    if not (0 <= low <= high <= 31) or high - low + 1 > 16:
        raise ValueError(f"Invalid bit range [{high}:{low}] for a 16-bit field")
    # String index 0 is bit 31
    piece = bits32[31 - high:32 - low]
    return piece.rjust(16, '0')


def bits_to_hex(bits):
    """Maps each 4-bit group (from the most significant end) to one upper case hex digit."""
    if not bits or len(bits) % 4 != 0:
        raise ValueError(f"Bit string length must be a non-zero multiple of 4, got {len(bits or '')}")
    if not _BITS_RE.match(bits):
        raise ValueError(f"Invalid bit string: '{bits}'")
    return ''.join(format(int(bits[i:i + 4], 2), 'X') for i in range(0, len(bits), 4))


def address_to_hex16(address):
    """Encodes a word address as 4 hex digits (16-bit unsigned)."""
    if address < 0 or address > 0xFFFF:
        raise ValueError(f"Address {address} does not fit in 16 bits")
    return bits_to_hex(encode_fixed(address, 16))
