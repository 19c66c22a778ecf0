"""Huffman tables described by code lengths, as stored in LSD files."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tools import BitStream, bit_length


@dataclass
class HuffmanNode:
    """Inner tree node.

    A positive child is a 1-based node index, a negative child ``c`` is the
    leaf for symbol ``-1 - c``, and zero means the slot is empty.
    """

    left: int = 0
    right: int = 0
    parent: int = 0
    weight: int = 0


@dataclass
class LenTable:
    """A Huffman tree rebuilt from (symbol index, code length) pairs."""

    nodes: list[HuffmanNode] = field(default_factory=list)
    symidx2nodeidx: list[int] = field(default_factory=list)
    next_node_position: int = 0

    def max_len(self) -> int:
        """Length of the longest code in the table."""
        if not self.nodes or not self.symidx2nodeidx:
            raise ValueError("empty table")
        longest = 0
        for node_idx in self.symidx2nodeidx:
            if node_idx < 0:
                raise ValueError("symbol was never placed in the tree")
            length = 1
            parent = self.nodes[node_idx].parent
            while parent != -1:
                length += 1
                parent = self.nodes[parent].parent
            longest = max(longest, length)
        return longest

    def place_symidx(self, sym_idx: int, node_idx: int, length: int) -> bool:
        """Put a symbol at depth ``length`` below ``node_idx``; False if no room."""
        if length <= 0:
            raise ValueError(f"code length must be positive, got {length}")
        nodes = self.nodes
        if length == 1:
            if nodes[node_idx].left == 0:
                nodes[node_idx].left = -1 - sym_idx
                self.symidx2nodeidx[sym_idx] = node_idx
                return True
            if nodes[node_idx].right == 0:
                nodes[node_idx].right = -1 - sym_idx
                self.symidx2nodeidx[sym_idx] = node_idx
                return True
            return False
        if nodes[node_idx].left == 0:
            nodes[self.next_node_position] = HuffmanNode(0, 0, node_idx, -1)
            self.next_node_position += 1
            nodes[node_idx].left = self.next_node_position
        if nodes[node_idx].left > 0:
            if self.place_symidx(sym_idx, nodes[node_idx].left - 1, length - 1):
                return True
        if nodes[node_idx].right == 0:
            nodes[self.next_node_position] = HuffmanNode(0, 0, node_idx, -1)
            self.next_node_position += 1
            nodes[node_idx].right = self.next_node_position
        if nodes[node_idx].right > 0:
            if self.place_symidx(sym_idx, nodes[node_idx].right - 1, length - 1):
                return True
        return False

    def read(self, bstr: BitStream) -> None:
        """Load the table from its serialized form."""
        count = bstr.read(32)
        bits_per_len = bstr.read(8)
        idx_bit_size = bit_length(count)
        if count < 2:
            raise ValueError(f"a table needs at least two symbols, got {count}")
        self.symidx2nodeidx = [-1] * count
        self.nodes = [HuffmanNode() for _ in range(count - 1)]
        root_idx = len(self.nodes) - 1
        self.nodes[root_idx] = HuffmanNode(0, 0, -1, -1)
        self.next_node_position = 0
        for _ in range(count):
            sym_idx = bstr.read(idx_bit_size)
            length = bstr.read(bits_per_len)
            self.place_symidx(sym_idx, root_idx, length)

    def dump_dot(self) -> str:
        """Render the tree as a Graphviz digraph."""
        lines = ["digraph G {\n"]
        for node_idx, node in enumerate(self.nodes):
            lines.append(_dump_edge(node.left, node_idx, "0"))
            lines.append(_dump_edge(node.right, node_idx, "1"))
        lines.append("}")
        return "".join(lines)

    def decode(self, bstr: BitStream) -> int:
        """Read one code from the stream and return its symbol index."""
        if not self.nodes:
            raise ValueError("empty table")
        node = self.nodes[-1]
        while True:
            child = node.right if bstr.read(1) else node.left
            if child < 0:
                return -1 - child
            if child == 0:
                raise ValueError("code leads to an empty branch")
            node = self.nodes[child - 1]


def _dump_edge(child_idx: int, node_idx: int, label: str) -> str:
    if child_idx > 0:
        return f'{child_idx - 1} -> {node_idx} [label=" {label} "]\n'
    if child_idx < 0:
        return f'sym_{-1 - child_idx} -> {node_idx} [label=" {label} "]\n'
    return ""