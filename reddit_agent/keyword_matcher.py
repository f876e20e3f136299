"""
Multi-keyword matching over Reddit post text.

An Aho-Corasick automaton finds every configured keyword in a single pass
over the text, so the cost of matching a post does not grow with the number
of products being monitored.
"""

from collections import deque
from typing import Dict, Iterable, List, Optional, Set, Tuple

from reddit_agent.models import KeywordEntry


class _Node:
    __slots__ = ("children", "fail", "output")

    def __init__(self):
        self.children: Dict[str, "_Node"] = {}
        self.fail: Optional["_Node"] = None
        self.output: List[KeywordEntry] = []


class AhoCorasick:
    """Case-insensitive matcher for a fixed set of keyword entries."""

    def __init__(self, entries: Iterable[KeywordEntry]):
        self.root = _Node()
        self._build_trie(entries)
        self._build_failure_links()

    def _build_trie(self, entries: Iterable[KeywordEntry]) -> None:
        for entry in entries:
            keyword = entry.keyword.lower()
            if not keyword:
                continue
            node = self.root
            for char in keyword:
                node = node.children.setdefault(char, _Node())
            node.output.append(entry)

    def _build_failure_links(self) -> None:
        self.root.fail = self.root
        queue = deque()
        for child in self.root.children.values():
            child.fail = self.root
            queue.append(child)

        while queue:
            current = queue.popleft()
            for char, child in current.children.items():
                queue.append(child)

                fail = current.fail
                while fail is not self.root and char not in fail.children:
                    fail = fail.fail

                candidate = fail.children.get(char)
                child.fail = candidate if candidate is not None and candidate is not child else self.root
                child.output.extend(child.fail.output)

    def match(self, text: str) -> List[KeywordEntry]:
        """
        Find every keyword entry occurring in ``text``.

        Each (product_id, keyword) pair is reported once, in order of first
        occurrence.
        """
        results: List[KeywordEntry] = []
        seen: Set[Tuple[str, str]] = set()
        node = self.root

        for char in text.lower():
            while node is not self.root and char not in node.children:
                node = node.fail
            node = node.children.get(char, self.root)

            for entry in node.output:
                key = (entry.product_id, entry.keyword)
                if key not in seen:
                    seen.add(key)
                    results.append(entry)

        return results


def build_matcher(entries: Iterable[KeywordEntry]) -> AhoCorasick:
    return AhoCorasick(entries)
