"""Article headings: decoding, DSL rendering and merging of variant spellings."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from .decoders import DictionaryDecoder
from .tools import BitStream


@dataclass(frozen=True)
class CharInfo:
    """One heading character.

    Unsorted characters are shown but ignored when sorting; escaped ones are
    preceded by a backslash in DSL text.
    """

    sorted: bool
    escaped: bool
    char: str


CharList = list[CharInfo]
Split = tuple[CharList, CharList, CharList]
Matcher = Callable[[CharList], Optional[Split]]


@dataclass
class ArticleHeading:
    """A heading with its characters and the reference of its article."""

    chars: CharList = field(default_factory=list)
    reference: int = 0

    def load(self, decoder: DictionaryDecoder, bstr: BitStream, known_prefix: str) -> str:
        """Decode the heading from ``bstr``; return the new known prefix."""
        prefix_len = decoder.decode_prefix_len(bstr)
        postfix_len = decoder.decode_postfix_len(bstr)
        text = decoder.decode_heading(bstr, postfix_len)
        self.reference = decoder.read_reference2(bstr)
        known = known_prefix[:prefix_len] + text
        pairs: deque[tuple[int, str]] = deque()
        if bstr.read(1):
            for _ in range(bstr.read(8)):
                idx = bstr.read(8)
                pairs.append((idx, chr(bstr.read(16))))
        self.chars = _chars_from_pairs(pairs, known)
        return known

    def text(self) -> str:
        """The sorted characters only."""
        return "".join(info.char for info in self.chars if info.sorted)

    def dsl_text(self) -> str:
        """The heading as DSL text, unsorted runs in braces."""
        out: list[str] = []
        group = False
        for info in self.chars:
            if group and info.sorted:
                out.append("}")
                group = False
            elif not group and not info.sorted:
                out.append("{")
                group = True
            if info.escaped:
                out.append("\\")
            out.append(info.char)
        if group:
            out.append("}")
        return "".join(out)


def _chars_from_pairs(pairs: deque[tuple[int, str]], text: str) -> CharList:
    text_queue = deque(text)

    def next_char(idx: int) -> tuple[str, bool]:
        if pairs and pairs[0][0] == idx:
            return pairs.popleft()[1], False
        if not text_queue:
            raise ValueError("heading extension refers past the end of the text")
        return text_queue.popleft(), True

    chars: CharList = []
    idx = 0
    while text_queue or pairs:
        char, is_sorted = next_char(idx)
        escaped = False
        if char == "\\":
            idx += 1
            char, is_sorted = next_char(idx)
            escaped = True
        chars.append(CharInfo(is_sorted, escaped, char))
        idx += 1
    return chars


def _find(chars: CharList, start: int, pattern: CharList) -> int:
    width = len(pattern)
    for pos in range(start, len(chars) - width + 1):
        if chars[pos:pos + width] == pattern:
            return pos
    return len(chars)


def _same(a: CharList, b: CharList, ignore_sortedness: bool) -> bool:
    if len(a) != len(b):
        return False
    return all(
        l.escaped == r.escaped and l.char == r.char and (ignore_sortedness or l.sorted == r.sorted)
        for l, r in zip(a, b)
    )


def _all_unsorted(chars: CharList) -> bool:
    return all(not info.sorted for info in chars)


_OPEN = CharInfo(False, False, "(")
_CLOSE = CharInfo(False, False, ")")


def _match_b(chars: CharList) -> Optional[Split]:
    m = _find(chars, 0, [_OPEN])
    r = _find(chars, m, [_CLOSE])
    if m == len(chars) or r == len(chars):
        return None
    return chars[:m], chars[m + 1:r], chars[r + 1:]


def _match_a(chars: CharList) -> Optional[Split]:
    split = _match_b(chars)
    if split is None or not _all_unsorted(split[1]):
        return None
    return split


def _match_cd(chars: CharList, first_space_sorted: bool) -> Optional[Split]:
    m = _find(chars, 0, [CharInfo(first_space_sorted, False, " "), _OPEN])
    r = _find(chars, m, [_CLOSE])
    if m == len(chars) or r == len(chars):
        return None
    if r + 1 != len(chars):
        return None
    return chars[:m], chars[m + 2:r], []


def _match_c(chars: CharList) -> Optional[Split]:
    split = _match_cd(chars, False)
    if split is None or not _all_unsorted(split[1]):
        return None
    return split


def _match_d(chars: CharList) -> Optional[Split]:
    return _match_cd(chars, True)


def _match_ef(chars: CharList, last_space_sorted: bool) -> Optional[Split]:
    m = _find(chars, 0, [CharInfo(True, False, " "), _OPEN])
    r = _find(chars, m, [_CLOSE, CharInfo(last_space_sorted, False, " ")])
    if m == len(chars) or r == len(chars):
        return None
    return chars[:m], chars[m + 2:r], chars[r + 2:]


def _match_e(chars: CharList) -> Optional[Split]:
    split = _match_ef(chars, False)
    if split is None or not _all_unsorted(split[1]):
        return None
    return split


def _match_f(chars: CharList) -> Optional[Split]:
    return _match_ef(chars, True)


def _try_collapse(
    variant1: ArticleHeading,
    variant2: ArticleHeading,
    before_middle: CharList,
    after_middle: CharList,
    matcher_a: Matcher,
    matcher_b: Matcher,
) -> Optional[ArticleHeading]:
    a: Optional[Split] = None
    b: Optional[Split] = None
    a_first = matcher_a(variant1.chars)
    if a_first is not None:
        a = a_first
        b = matcher_b(variant2.chars)
    else:
        b_first = matcher_b(variant1.chars)
        if b_first is not None:
            b = b_first
            a = matcher_a(variant2.chars)
    if a is None or b is None:
        return None
    aleft, amiddle, aright = a
    bleft, bmiddle, bright = b
    if not (_same(aleft, bleft, False) and _same(amiddle, bmiddle, True) and _same(aright, bright, False)):
        return None
    chars = [*bleft, *before_middle, *bmiddle, *after_middle, *bright]
    return ArticleHeading(chars, variant1.reference)


_SORTED_SPACE = CharInfo(True, False, " ")
_SORTED_OPEN = CharInfo(True, False, "(")
_SORTED_CLOSE = CharInfo(True, False, ")")

_COLLAPSERS: tuple[tuple[CharList, CharList, Matcher, Matcher], ...] = (
    ([_SORTED_OPEN], [_SORTED_CLOSE], _match_a, _match_b),
    ([_SORTED_SPACE, _SORTED_OPEN], [_SORTED_CLOSE], _match_c, _match_d),
    ([_SORTED_SPACE, _SORTED_OPEN], [_SORTED_CLOSE, _SORTED_SPACE], _match_e, _match_f),
)


def _try_collapse_pair(headings: list[ArticleHeading], first: int, last: int) -> Optional[int]:
    """Merge the first collapsible pair in ``[first, last)`` into its earlier member.

    Returns the index of the later member, which is now redundant.
    """
    for i in range(first, last):
        for j in range(i + 1, last):
            for before, after, matcher_a, matcher_b in _COLLAPSERS:
                collapsed = _try_collapse(headings[i], headings[j], before, after, matcher_a, matcher_b)
                if collapsed is not None:
                    headings[i] = collapsed
                    return j
    return None


def _reference_ranges(headings: list[ArticleHeading], dont_group: bool) -> Iterator[tuple[int, int]]:
    start = 0
    while start < len(headings):
        stop = start + 1
        if not dont_group:
            ref = headings[start].reference
            while stop < len(headings) and headings[stop].reference == ref:
                stop += 1
        yield start, stop
        start = stop


def iter_reference_sets(
    headings: list[ArticleHeading], dont_group: bool = False
) -> Iterator[list[ArticleHeading]]:
    """Yield runs of adjacent headings sharing a reference, or single headings."""
    for start, stop in _reference_ranges(headings, dont_group):
        yield headings[start:stop]


def group_headings_by_reference(headings: list[ArticleHeading]) -> None:
    """Reorder in place so headings with one reference are adjacent.

    Groups appear in order of first occurrence; order inside a group is kept.
    """
    groups: dict[int, list[ArticleHeading]] = {}
    for heading in headings:
        groups.setdefault(heading.reference, []).append(heading)
    headings[:] = [heading for group in groups.values() for heading in group]


def collapse_variants(headings: list[ArticleHeading]) -> None:
    """Group headings by reference and merge variant spellings, in place."""
    group_headings_by_reference(headings)
    to_remove: set[int] = set()
    for start, stop in _reference_ranges(headings, False):
        if stop - start > 1:
            while (j := _try_collapse_pair(headings, start, stop)) is not None:
                to_remove.add(j)
    headings[:] = [h for idx, h in enumerate(headings) if idx not in to_remove]