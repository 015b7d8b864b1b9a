"""Relay topology shared by every process.

A path is a tuple of process ids: the source first, then each relayer in
turn. Its rank is len(path) - 1 and its last element is the holder, the
process whose relay produced it. No id appears twice on a path.

    paths_by_round[rank][holder] -> tuple of paths of that rank ending at holder
    children[path]               -> tuple of paths extending path by one id

Both tables are built once per (m, n, source) and never mutated afterwards.
"""

import logging
from functools import lru_cache
from types import MappingProxyType

from byzantine.om.values import format_path

log = logging.getLogger(__name__)

class PathTree:
    def __init__(self, m, n, source, paths_by_round, children):
        self.m              = m
        self.n              = n
        self.source         = source
        self.paths_by_round = MappingProxyType({r: MappingProxyType(d) for r, d in paths_by_round.items()})
        self.children       = MappingProxyType(children)

    @property
    def root(self):
        return (self.source,)

    def paths(self, rank, holder):
        return self.paths_by_round.get(rank, {}).get(holder, ())

    def rank(self, rank):
        # holders in ascending id order
        by_holder = self.paths_by_round.get(rank, {})
        for holder in sorted(by_holder):
            yield from by_holder[holder]

    def leaves(self):
        return self.rank(self.m)

    def children_of(self, path):
        return self.children.get(tuple(path), ())

    def __iter__(self):
        for rank in range(self.m + 1):
            yield from self.rank(rank)

    def __len__(self):
        return sum(len(paths) for by_holder in self.paths_by_round.values()
                              for paths in by_holder.values())

def _expand(m, n, source):
    paths_by_round = {rank: {} for rank in range(m + 1)}
    children       = {}
    # (path, used-id bitmask), popped depth first
    stack = [((source,), 1 << source)]
    while stack:
        path, used = stack.pop()
        rank = len(path) - 1
        paths_by_round[rank].setdefault(path[-1], []).append(path)
        if rank == m:
            continue
        kids = [path + (i,) for i in range(n) if not used & (1 << i)]
        children[path] = tuple(kids)
        # reversed so the lowest id is expanded first
        for kid in reversed(kids):
            stack.append((kid, used | (1 << kid[-1])))
        if log.isEnabledFor(logging.DEBUG):
            log.debug(f"{format_path(path)}, children = {' '.join(format_path(k) for k in kids)}")
    for by_holder in paths_by_round.values():
        for holder in by_holder:
            by_holder[holder] = tuple(by_holder[holder])
    return paths_by_round, children

@lru_cache(maxsize=None)
def build_tree(m, n, source) -> PathTree:
    """Enumerate every relay path of length 1..m+1 rooted at source.

    Cached: every caller asking for the same (m, n, source) shares one
    PathTree. Call build_tree.cache_clear() to force a rebuild.
    """
    paths_by_round, children = _expand(m, n, source)
    return PathTree(m, n, source, paths_by_round, children)
