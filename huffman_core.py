# filename: huffman_core.py

import heapq
import logging
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Union

logger = logging.getLogger(__name__)

# End of Transmission Block, appended to every message as its terminator
SENTINEL = chr(23)


class HuffmanError(ValueError):
    """Base class for codec failures."""


class UnencodableCharacterError(HuffmanError):
    def __init__(self, character, position):
        super().__init__(
            f"character {character!r} at position {position} is not in the encoding map"
        )
        self.character = character
        self.position = position


class MalformedStreamError(HuffmanError):
    pass


@dataclass(frozen=True)
class Leaf:
    weight: int
    character: str


@dataclass(frozen=True)
class Internal:
    weight: int
    # inherited from the zero child, only used to order merges
    character: str
    zero: "Node"
    one: "Node"


Node = Union[Leaf, Internal]


def build_frequency_table(corpus: str) -> Dict[str, int]:
    """Count every character of the corpus; the sentinel is pinned to 1."""
    freqs = dict(Counter(corpus))
    freqs[SENTINEL] = 1
    return freqs


def merge_key(node: Node):
    # Total order for the merge queue: weight first, then character code
    return (node.weight, ord(node.character))


class HuffmanLogic:
    def build_tree(self, frequencies: Mapping[str, int]) -> Node:
        if not frequencies:
            raise ValueError("cannot build a trie from an empty frequency table")

        # Keys are unique among live nodes: a merged node takes over the
        # character of the node it consumed, so nodes are never compared.
        priority_queue = []
        for char, freq in frequencies.items():
            leaf = Leaf(freq, char)
            priority_queue.append((merge_key(leaf), leaf))
        heapq.heapify(priority_queue)

        # Iteratively merge the two lightest nodes until only the root is left
        while len(priority_queue) > 1:
            _, first = heapq.heappop(priority_queue)
            _, second = heapq.heappop(priority_queue)
            merged = Internal(first.weight + second.weight, first.character, first, second)
            heapq.heappush(priority_queue, (merge_key(merged), merged))

        root = priority_queue[0][1]
        logger.debug("built trie over %d symbols, total weight %d", len(frequencies), root.weight)
        return root

    def generate_codes(self, node: Node) -> Mapping[str, str]:
        """Derive the character -> codeword map by walking the trie, zero side first.

        A trie that is a single leaf (the sentinel-only table of an empty
        corpus) gets the one-bit codeword ``"0"`` so every message still
        occupies at least one bit.
        """
        codes = {}
        if isinstance(node, Leaf):
            codes[node.character] = "0"
        else:
            self._walk(node, "", codes)
        return MappingProxyType(dict(sorted(codes.items())))

    def _walk(self, node, current_code, codes):
        if isinstance(node, Leaf):
            codes[node.character] = current_code
            return
        self._walk(node.zero, current_code + "0", codes)
        self._walk(node.one, current_code + "1", codes)


def pack_bits(bits: str) -> bytes:
    """Pack a string of '0'/'1' MSB-first, zero padding the last byte on the right."""
    bits += "0" * (-len(bits) % 8)
    return bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8))


def iter_bits(data) -> Iterator[int]:
    for byte in data:
        for shift in range(7, -1, -1):
            yield (byte >> shift) & 1
