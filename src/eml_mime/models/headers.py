"""
Ordered, duplicate-preserving header collection.

Headers are stored as an immutable sequence of ``(name, raw_value)`` pairs in
insertion order. Lookups are case-insensitive and "last value wins"; names keep
the case they were written with. Every mutating operation returns a new
``Headers`` instance.
"""

from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

HeaderPair = Tuple[str, str]


class WhitespacePolicy(str, Enum):
    """How header values are stored when added."""

    NORMALIZE = "normalize"  # Single leading space, folded lines re-indented with a tab
    PRESERVE = "preserve"  # Stored verbatim


def normalize_value(value: str) -> str:
    """
    Normalize a header value for storage.

    Strips surrounding whitespace, re-indents continuation lines with a single
    tab, and prefixes the value with one space (as written after the colon).

    Args:
        value: Header value as supplied by the caller

    Returns:
        Raw value ready to be written after ``Name:``
    """
    lines = [line.strip() for line in value.strip().splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return ""
    return " " + "\n\t".join(lines)


class Headers:
    """
    Ordered multi-map of email headers.

    Built from pairs of ``(name, raw_value)`` where ``raw_value`` is the text
    that follows the colon on the wire (continuation lines included).
    """

    __slots__ = ("_pairs", "_index")

    def __init__(self, pairs: Iterable[HeaderPair] = ()):
        self._pairs: Tuple[HeaderPair, ...] = tuple(pairs)
        index: Dict[str, List[int]] = {}
        for position, (name, _) in enumerate(self._pairs):
            index.setdefault(name.lower(), []).append(position)
        self._index = index

    @classmethod
    def of_list(
        cls,
        pairs: Iterable[HeaderPair],
        whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
    ) -> "Headers":
        """
        Build headers from caller-supplied name/value pairs.

        Args:
            pairs: Header name/value pairs in the order they should appear
            whitespace: Whether to normalize or keep values verbatim

        Returns:
            New Headers instance
        """
        return cls(_prepare(pairs, whitespace))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def last(self, name: str) -> Optional[str]:
        """Return the last value for ``name`` (stripped), or None if absent."""
        positions = self._index.get(name.lower())
        if not positions:
            return None
        return self._pairs[positions[-1]][1].strip()

    def find_all(self, name: str) -> List[str]:
        """Return every value for ``name`` in header order (stripped)."""
        return [self._pairs[i][1].strip() for i in self._index.get(name.lower(), [])]

    def names(self) -> List[str]:
        return [name for name, _ in self._pairs]

    def to_list(self) -> List[HeaderPair]:
        """Raw ``(name, raw_value)`` pairs in order."""
        return list(self._pairs)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[HeaderPair]:
        return ((name, value.strip()) for name, value in self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __repr__(self) -> str:
        return f"Headers({list(self)!r})"

    # ------------------------------------------------------------------
    # Writes (all return new instances)
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        value: str,
        whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
    ) -> "Headers":
        return self.add_all([(name, value)], whitespace=whitespace)

    def add_all(
        self,
        pairs: Iterable[HeaderPair],
        whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
    ) -> "Headers":
        """Append ``pairs`` after the existing headers."""
        return Headers(self._pairs + tuple(_prepare(pairs, whitespace)))

    def remove(self, name: str) -> "Headers":
        """Drop every entry named ``name`` (case-insensitive)."""
        key = name.lower()
        return Headers(pair for pair in self._pairs if pair[0].lower() != key)

    def set_at_bottom(
        self,
        name: str,
        value: str,
        whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
    ) -> "Headers":
        """Remove all entries named ``name`` and append the new value at the end."""
        return self.remove(name).add(name, value, whitespace=whitespace)

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize as ``Name:value`` lines, each terminated by LF."""
        return b"".join(
            f"{name}:{value}\n".encode("utf-8", "surrogateescape")
            for name, value in self._pairs
        )


def _prepare(pairs: Iterable[HeaderPair], whitespace: WhitespacePolicy) -> List[HeaderPair]:
    if whitespace == WhitespacePolicy.NORMALIZE:
        return [(name.strip(), normalize_value(value)) for name, value in pairs]
    return [(name, value) for name, value in pairs]


HeaderParams = List[Tuple[str, Optional[str]]]


def split_params(value: str) -> Optional[Tuple[str, HeaderParams]]:
    """
    Split a structured header value such as ``text/plain; charset="utf-8"``.

    The value is split on ``;`` and every segment stripped. The first segment is
    the primary value; each later segment is split on its first ``=`` into a
    stripped key and value (None for a bare token).

    Args:
        value: Header value

    Returns:
        ``(primary, [(key, value), ...])``, or None if the value is blank
    """
    if not value.strip():
        return None
    primary, *segments = [segment.strip() for segment in value.split(";")]
    params: HeaderParams = []
    for segment in segments:
        key, sep, param = segment.partition("=")
        if sep:
            params.append((key.strip(), param.strip()))
        else:
            params.append((segment, None))
    return primary, params


def find_param(params: HeaderParams, key: str) -> Optional[str]:
    """First value for ``key`` (case-insensitive), unquoted."""
    key = key.lower()
    for name, value in params:
        if name.lower() == key and value is not None:
            return unquote(value)
    return None


def unquote(value: str) -> str:
    """Strip one matching pair of surrounding double quotes."""
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value
