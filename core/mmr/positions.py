"""
Module 03 - MMR Position Index
Pure arithmetic over the dense MMR position numbering.

Owner: Protocol/Crypto Engineer
Module ID: M03

Numbering scheme (post-order, height-interleaved): leaves and internal
nodes share one zero-based counter, and a parent is numbered right after
its right child. Eleven nodes (seven leaves) look like this:

    height
      2            6
                 /   \\
      1        2       5        9
              / \\     / \\     / \\
      0      0   1   3   4   7   8   10

Peaks for size 11 are [6, 9, 10]; mountains are listed tallest first,
which is also left to right.

Leaf predicate:
    is_leaf(pos) <=> height(pos) == 0

The bit trick pos & (pos + 1) == 0 only recognises positions of the form
2^k - 1 (0, 1, 3, 7, 15, ...). Those are always leaves, but most leaves
(4, 8, 10, 11, ...) are not of that form, so it is exposed separately as
follows_perfect_range() and never used as the leaf test.
"""
from __future__ import annotations


def _all_ones(bits: int) -> int:
    return (1 << bits) - 1


def pos_height_in_tree(pos: int) -> int:
    """
    Height of the node at a position (leaves are height 0).

    Repeatedly strips the largest left-hand perfect subtree the position
    lies beyond; what remains is the position inside its own left-most
    spine, which equals its height.
    """
    if pos < 0:
        raise ValueError(f"Position must be non-negative, got {pos}")
    peak_size = _all_ones(pos.bit_length())
    while peak_size > 0:
        if pos >= peak_size:
            pos -= peak_size
        peak_size >>= 1
    return pos


def height(pos: int) -> int:
    """Alias for pos_height_in_tree()."""
    return pos_height_in_tree(pos)


def is_leaf(pos: int) -> bool:
    """True iff the node at pos is a leaf."""
    return pos_height_in_tree(pos) == 0


def follows_perfect_range(pos: int) -> bool:
    """
    True iff pos == 2^k - 1 for some k >= 0.

    Such a position is the leaf pushed right after the range consisted of
    exactly one complete mountain. Sufficient for is_leaf(), not necessary.
    """
    return pos >= 0 and pos & (pos + 1) == 0


def parent_offset(height: int) -> int:
    """Distance from a left child at `height` to its parent."""
    return 2 << height


def sibling_offset(height: int) -> int:
    """Distance between two siblings at `height`."""
    return (2 << height) - 1


def is_right_child(pos: int) -> bool:
    """
    True iff the node at pos is the right child of its parent.

    A right child is immediately followed by its parent, which is one
    level higher.
    """
    return pos_height_in_tree(pos + 1) > pos_height_in_tree(pos)


def sibling(pos: int) -> int:
    """Position of the sibling of pos in the (unbounded) range."""
    h = pos_height_in_tree(pos)
    if is_right_child(pos):
        return pos - sibling_offset(h)
    return pos + sibling_offset(h)


def parent(pos: int) -> int:
    """Position of the parent of pos in the (unbounded) range."""
    h = pos_height_in_tree(pos)
    if is_right_child(pos):
        return pos + 1
    return pos + parent_offset(h)


def children(pos: int) -> tuple[int, int]:
    """(left, right) child positions of an internal node."""
    h = pos_height_in_tree(pos)
    if h == 0:
        raise ValueError(f"Position {pos} is a leaf and has no children")
    right = pos - 1
    left = right - sibling_offset(h - 1)
    return left, right


def _decompose(mmr_size: int) -> tuple[list[int], int]:
    """Greedy split of mmr_size into mountains; returns (peaks, remainder)."""
    if mmr_size < 0:
        raise ValueError(f"MMR size must be non-negative, got {mmr_size}")
    peaks: list[int] = []
    if mmr_size == 0:
        return peaks, 0
    remaining = mmr_size
    peaks_sum = 0
    peak_size = _all_ones(mmr_size.bit_length())
    while peak_size > 0:
        if remaining >= peak_size:
            remaining -= peak_size
            peaks.append(peaks_sum + peak_size - 1)
            peaks_sum += peak_size
        peak_size >>= 1
    return peaks, remaining


def get_peaks(mmr_size: int) -> list[int]:
    """
    Peak positions for an MMR of mmr_size nodes, tallest (left) first.

    The subtree sizes of the returned peaks sum to mmr_size and never
    overlap. Returns [] for an empty range.
    """
    peaks, _ = _decompose(mmr_size)
    return peaks


def peaks(mmr_size: int) -> list[int]:
    """Alias for get_peaks()."""
    return get_peaks(mmr_size)


def is_valid_mmr_size(mmr_size: int) -> bool:
    """
    True iff some sequence of pushes produces exactly mmr_size nodes.

    Sizes such as 2 or 5 can never be observed: the push that creates
    the second leaf also creates its parent.
    """
    if mmr_size < 0:
        return False
    _, remainder = _decompose(mmr_size)
    return remainder == 0


def leaf_index_to_mmr_size(index: int) -> int:
    """MMR size right after pushing the leaf with 0-based leaf index `index`."""
    if index < 0:
        raise ValueError(f"Leaf index must be non-negative, got {index}")
    leaves_count = index + 1
    peak_count = bin(leaves_count).count("1")
    return 2 * leaves_count - peak_count


def leaf_index_to_pos(index: int) -> int:
    """Position of the leaf with 0-based leaf index `index`."""
    leaves_count = index + 1
    trailing_zeros = (leaves_count & -leaves_count).bit_length() - 1
    return leaf_index_to_mmr_size(index) - trailing_zeros - 1


def leaf_count(mmr_size: int) -> int:
    """Number of leaves in an MMR of mmr_size nodes."""
    return sum(1 << pos_height_in_tree(p) for p in get_peaks(mmr_size))


def pos_to_leaf_index(pos: int) -> int:
    """
    0-based leaf index of the leaf at pos.

    A leaf is always written at the current size, so the number of
    leaves before it is leaf_count(pos).
    """
    if not is_leaf(pos):
        raise ValueError(f"Position {pos} is not a leaf")
    return leaf_count(pos)


__all__ = [
    "pos_height_in_tree",
    "height",
    "is_leaf",
    "follows_perfect_range",
    "parent_offset",
    "sibling_offset",
    "is_right_child",
    "sibling",
    "parent",
    "children",
    "get_peaks",
    "peaks",
    "is_valid_mmr_size",
    "leaf_index_to_mmr_size",
    "leaf_index_to_pos",
    "leaf_count",
    "pos_to_leaf_index",
]
