# // filename: huffman_service.py

import logging
from types import MappingProxyType

from huffman_core import (
    SENTINEL,
    HuffmanLogic,
    Leaf,
    MalformedStreamError,
    UnencodableCharacterError,
    build_frequency_table,
    iter_bits,
    pack_bits,
)

logger = logging.getLogger(__name__)


class HuffmanService:
    """Reusable Huffman code built from the character distribution of a corpus.

    The trie and encoding map are derived once here and only read afterwards,
    so one instance can serve any number of compress/decompress calls. Text
    compressed with one instance can only be decompressed by an instance
    built from the same corpus.
    """

    def __init__(self, corpus=""):
        self.logic = HuffmanLogic()
        self._frequencies = MappingProxyType(build_frequency_table(corpus))
        self._tree = self.logic.build_tree(self._frequencies)
        self._codes = self.logic.generate_codes(self._tree)
        logger.debug(
            "codec ready: %d codewords, longest %d bits",
            len(self._codes),
            max(len(code) for code in self._codes.values()),
        )

    @property
    def frequencies(self):
        return self._frequencies

    @property
    def tree(self):
        return self._tree

    @property
    def codes(self):
        return self._codes

    def compress(self, data):
        codes = self._codes
        parts = []
        for position, char in enumerate(data):
            code = codes.get(char)
            if code is None:
                raise UnencodableCharacterError(char, position)
            parts.append(code)
        parts.append(codes[SENTINEL])

        packed = pack_bits("".join(parts))
        logger.debug("compressed %d characters into %d bytes", len(data), len(packed))
        return packed

    def decompress(self, data):
        root = self._tree
        node = root
        decoded = []
        for bit in iter_bits(data):
            if isinstance(root, Leaf):
                # single-leaf trie: every codeword is the bit 0
                if bit:
                    raise MalformedStreamError("unexpected 1 bit in a single-symbol stream")
            else:
                node = node.one if bit else node.zero
                if not isinstance(node, Leaf):
                    continue
                # a leaf costs no bit; restart from the root for the next symbol
            if node.character == SENTINEL:
                logger.debug("decompressed %d bytes into %d characters", len(data), len(decoded))
                return "".join(decoded)
            decoded.append(node.character)
            node = root

        raise MalformedStreamError(
            f"stream ended after {len(decoded)} characters without an end-of-message marker"
        )
