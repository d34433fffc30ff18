# tmips/tmips_symtab.py
import logging
from tmips.tmips_consts import HASH_SIZE, HASH_BASE

logger = logging.getLogger(__name__)


class DuplicateSymbolError(Exception):
    """Raised when a label is defined a second time. Carries the address that was kept."""

    def __init__(self, name, address):
        super().__init__(f"Symbol '{name}' already defined at address {address}")
        self.name = name
        self.address = address


def hashgen(name, size):
    """Polynomial hash h = |BASE*h + byte| mod size, accumulated left to right."""
    if size < 2:
        raise ValueError(f"Hash table size must be at least 2, got {size}")
    h = 0
    for byte in name.encode('utf-8'):
        h = abs(HASH_BASE * h + byte) % size
    return h


class SymbolTable:
    """
    Label -> word address mapping using separate chaining.

    Each bucket index maps to an ordered list of (name, address) pairs. Lookups scan
    the whole chain and compare the literal name, so two names that hash to the same
    bucket never shadow each other. Names are write-once: there is no delete.
    """

    def __init__(self, size=HASH_SIZE):
        if size < 2:
            raise ValueError(f"Hash table size must be at least 2, got {size}")
        self.size = size
        self.buckets = {}  # bucket index -> [(name, address), ...]
        self._count = 0

    def _find(self, chain, name):
        for entry_name, address in chain:
            if entry_name == name:
                return address
        return None

    def insert(self, name, address):
        """Adds a symbol. Raises DuplicateSymbolError (table untouched) if it already exists."""
        key = hashgen(name, self.size)
        chain = self.buckets.get(key)
        if chain is not None:
            existing = self._find(chain, name)
            if existing is not None:
                raise DuplicateSymbolError(name, existing)
        else:
            chain = self.buckets[key] = []
        chain.append((name, address))
        self._count += 1
        logger.debug(f"Symbol '{name}' -> {address} (bucket {key}, chain length {len(chain)})")

    def lookup(self, name):
        """Returns the address of 'name', or None if it was never defined."""
        chain = self.buckets.get(hashgen(name, self.size))
        if not chain:
            return None
        return self._find(chain, name)

    def bucket(self, name):
        """Returns a copy of the chain that 'name' hashes into."""
        return list(self.buckets.get(hashgen(name, self.size), []))

    def items(self):
        """Yields (name, address) pairs, bucket by bucket in index order."""
        for key in sorted(self.buckets):
            for name, address in self.buckets[key]:
                yield name, address

    def to_dict(self):
        return dict(self.items())

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __len__(self):
        return self._count

    def __repr__(self):
        return f"SymbolTable(size={self.size}, symbols={self._count})"
