"""Incremental building of flattened, dot-separated document keys."""

from __future__ import annotations


class KeyBuilder:
    """Builds nested keys such as ``a.b.c`` one part at a time.

    Lengths and positions are measured in UTF-8 bytes, so they can be used
    directly as offsets into the encoded key.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._parts: list[int] = []

    def is_empty(self) -> bool:
        """Whether no parts have been pushed."""
        return not self._parts

    def pop_part(self) -> None:
        """Remove the most recently pushed part; does nothing when empty."""
        if self._parts:
            del self._buffer[self._parts.pop():]

    def push_part(self, part: str) -> None:
        """Append a part to the end of the key, separated by a dot."""
        self._parts.append(len(self._buffer))
        if len(self._parts) > 1:
            self._buffer.append(ord("."))
        self._buffer.extend(part.encode("utf-8"))

    def truncate_parts(self, length: int) -> None:
        """Keep only the first ``length`` parts."""
        if length < 0:
            raise ValueError("length must not be negative")
        cut_to = self._parts[length] if length < len(self._parts) else len(self._buffer)
        del self._parts[length:]
        del self._buffer[cut_to:]

    def num_parts(self) -> int:
        """The number of parts in the key."""
        return len(self._parts)

    def as_str(self) -> str:
        """The full key as a string."""
        return self._buffer.decode("utf-8")

    def slice_at(self, pos: int) -> str:
        """The key from byte offset ``pos`` onwards."""
        if pos < 0:
            raise ValueError("pos must not be negative")
        return bytes(self._buffer[pos:]).decode("utf-8")

    def __len__(self) -> int:
        return len(self._buffer)

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f"KeyBuilder({self.as_str()!r})"