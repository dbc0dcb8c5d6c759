"""Tree presentation: rebuild nested trees from flat parent-pointer rows.

Folder rows, note rows and collection items all arrive from the database
as flat lists where each row names its parent. This module turns such a
list into a ``Forest`` (an arena of rows keyed by id plus child-id lists,
never parent/child object references), orders siblings, renders nested
response nodes, and flattens the forest back for substring search.

Everything here is pure: no sessions, no I/O.
"""

import unicodedata
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def name_key(value: Optional[str]) -> str:
    """Comparison key for names: Unicode-normalized and casefolded.

    Used both for sibling ordering and for duplicate-name checks, so
    "Работа" and "работа" collide the same way "Work" and "WORK" do.
    """
    return unicodedata.normalize("NFKC", value or "").casefold()


@dataclass
class Forest(Generic[T]):
    """Rows indexed by key, with child lists and root order."""

    nodes: Dict[Hashable, T] = field(default_factory=dict)
    children: Dict[Hashable, List[Hashable]] = field(default_factory=dict)
    roots: List[Hashable] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def children_of(self, key: Hashable) -> List[T]:
        return [self.nodes[k] for k in self.children.get(key, [])]


def build_tree(
    rows: Iterable[T],
    key: Callable[[T], Hashable] = attrgetter("id"),
    parent_key: Callable[[T], Optional[Hashable]] = attrgetter("parent_id"),
) -> Forest[T]:
    """Index rows by key and attach each one under its parent.

    Rows whose parent is absent from *rows* become roots, so a dangling
    reference never hides a node. A row repeated under the same key is
    kept once (first occurrence). Rows caught in a parent cycle are
    unreachable from any root; the first such row in input order is
    promoted to a root (its cycle edge is dropped) until every row is
    reachable.
    """
    forest: Forest[T] = Forest()
    order: List[Hashable] = []
    for row in rows:
        k = key(row)
        if k in forest.nodes:
            continue
        forest.nodes[k] = row
        forest.children[k] = []
        order.append(k)

    parents: Dict[Hashable, Hashable] = {}
    for k in order:
        p = parent_key(forest.nodes[k])
        if p is not None and p != k and p in forest.nodes:
            forest.children[p].append(k)
            parents[k] = p
        else:
            forest.roots.append(k)

    reached = _reachable(forest, forest.roots)
    if len(reached) < len(order):
        for k in order:
            if k in reached:
                continue
            forest.children[parents[k]].remove(k)
            forest.roots.append(k)
            reached |= _reachable(forest, [k])

    return forest


def _reachable(forest: Forest, start: Iterable[Hashable]) -> set:
    seen = set()
    stack = list(start)
    while stack:
        k = stack.pop()
        if k in seen:
            continue
        seen.add(k)
        stack.extend(forest.children.get(k, []))
    return seen


def flatten(forest: Forest[T]) -> List[T]:
    """All rows in pre-order (parent before its children), depth ignored."""
    out: List[T] = []
    stack = list(reversed(forest.roots))
    while stack:
        k = stack.pop()
        out.append(forest.nodes[k])
        stack.extend(reversed(forest.children[k]))
    return out


def sort_siblings(forest: Forest[T], sort_key: Callable[[T], Any]) -> Forest[T]:
    """Return a new forest with roots and every child list ordered by *sort_key*."""

    def ordered(keys: List[Hashable]) -> List[Hashable]:
        return sorted(keys, key=lambda k: sort_key(forest.nodes[k]))

    return Forest(
        nodes=dict(forest.nodes),
        children={k: ordered(v) for k, v in forest.children.items()},
        roots=ordered(forest.roots),
    )


def render(forest: Forest[T], to_node: Callable[[T, List[R]], R]) -> List[R]:
    """Build nested output bottom-up; ``to_node(row, rendered_children)``.

    Iterative post-order so deep trees do not hit the recursion limit.
    """
    built: Dict[Hashable, R] = {}
    stack = [(k, False) for k in reversed(forest.roots)]
    while stack:
        k, expanded = stack.pop()
        if expanded:
            built[k] = to_node(forest.nodes[k], [built[c] for c in forest.children[k]])
        else:
            stack.append((k, True))
            stack.extend((c, False) for c in reversed(forest.children[k]))
    return [built[k] for k in forest.roots]


def search(
    forest: Forest[T],
    term: str,
    texts: Callable[[T], Iterable[Optional[str]]],
) -> List[T]:
    """Rows (pre-order) where any of ``texts(row)`` contains *term*, casefolded.

    A blank term matches everything.
    """
    needle = name_key(term.strip())
    rows = flatten(forest)
    if not needle:
        return rows
    return [row for row in rows if any(needle in name_key(t) for t in texts(row) if t)]
