"""Fixed-size bit set over package indices."""


class Bitmap:
    """Set of integers in [0, size), stored one bit per index.

    The size is fixed at construction. Indices are not range-checked.
    """

    __slots__ = ('_size', '_bits')

    def __init__(self, size: int):
        self._size = size
        self._bits = bytearray((size + 7) // 8)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, i: int) -> bool:
        return bool(self._bits[i >> 3] & (1 << (i & 7)))

    def set(self, i: int):
        """Add index i to the set."""
        self._bits[i >> 3] |= 1 << (i & 7)

    def clear(self, i: int):
        """Remove index i from the set."""
        self._bits[i >> 3] &= ~(1 << (i & 7)) & 0xff

    def is_empty(self) -> bool:
        """Return True if no bit is set."""
        return self._bits.count(0) == len(self._bits)

    def clear_all(self):
        """Remove every index from the set."""
        self._bits[:] = bytes(len(self._bits))

    def __repr__(self) -> str:
        members = [i for i in range(self._size) if i in self]
        return f"Bitmap({self._size}, {members})"
