"""Dependency ordering of directory specs.

Directories must be materialized parents first, and an explicitly
declared directory must be materialized before any implicit request for
the same path so that its attributes win. This module builds that
"must precede" relation as an explicit graph and sorts it.

Two specs for the same physical directory at the same precedence level
(both explicit or both implicit) but with different user, group or mode
have no correct order. They are linked in both directions, so the
conflict surfaces as a cycle instead of an arbitrary winner.
"""

from __future__ import annotations

import heapq
import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from persistctl.core.errors import DependencyCycleError
from persistctl.planner.normalize import strict_prefix

if TYPE_CHECKING:
    from persistctl.models.spec import DirectorySpec

logger = logging.getLogger(__name__)


def must_precede(a: DirectorySpec, b: DirectorySpec) -> bool:
    """Check whether a has to be materialized before b.

    Args:
        a: Candidate predecessor.
        b: Candidate successor.

    Returns:
        True if b depends on a.
    """
    na, nb = a.normalized, b.normalized
    if strict_prefix(na.source, nb.source) or strict_prefix(na.destination, nb.destination):
        return True

    same_directory = a.source == b.source or a.destination == b.destination
    if not same_directory:
        return False
    if not a.implicit and b.implicit:
        return True
    # Same level, different attributes: deliberately unorderable
    return a.implicit == b.implicit and a.attributes != b.attributes


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """The must-precede relation over a list of specs.

    Attributes:
        nodes: Specs in input order; edges refer to their indices.
        edges: (before, after) index pairs.
    """

    nodes: tuple[DirectorySpec, ...]
    edges: frozenset[tuple[int, int]]


def build_dependency_graph(specs: Sequence[DirectorySpec]) -> DependencyGraph:
    """Compare every pair of specs and collect the dependency edges.

    Args:
        specs: Specs to order.

    Returns:
        Graph whose nodes are the specs in input order.
    """
    edges: set[tuple[int, int]] = set()
    for i, a in enumerate(specs):
        for j, b in enumerate(specs):
            if i != j and must_precede(a, b):
                edges.add((i, j))
    return DependencyGraph(nodes=tuple(specs), edges=frozenset(edges))


def toposort_dirs(specs: Sequence[DirectorySpec]) -> list[DirectorySpec]:
    """Sort specs so that every spec follows all specs it depends on.

    Specs with no ordering constraint between them keep their input
    order.

    Args:
        specs: Specs to sort.

    Returns:
        Specs in materialization order.

    Raises:
        DependencyCycleError: If the relation contains a cycle. The
            error carries the shortest cycle found.
    """
    graph = build_dependency_graph(specs)
    count = len(graph.nodes)

    adjacency: list[list[int]] = [[] for _ in range(count)]
    in_degree = [0] * count
    for before, after in graph.edges:
        adjacency[before].append(after)
        in_degree[after] += 1

    ready = [index for index in range(count) if in_degree[index] == 0]
    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        index = heapq.heappop(ready)
        order.append(index)
        for after in adjacency[index]:
            in_degree[after] -= 1
            if in_degree[after] == 0:
                heapq.heappush(ready, after)

    if len(order) < count:
        placed = set(order)
        remaining = [index for index in range(count) if index not in placed]
        cycle = _shortest_cycle(adjacency, remaining)
        logger.debug("Unsortable specs: %s", remaining)
        raise DependencyCycleError(
            cycle=[graph.nodes[index] for index in cycle],
            loops=[graph.nodes[index] for index in remaining],
        )

    logger.debug("Sorted %d directory specs", count)
    return [graph.nodes[index] for index in order]


def _shortest_cycle(adjacency: list[list[int]], candidates: list[int]) -> list[int]:
    """Find the shortest cycle through any of the candidate nodes.

    Args:
        adjacency: Successor lists for every node.
        candidates: Nodes left over by the sort; a cycle exists among them.

    Returns:
        Node indices along the cycle, starting from its lowest start node.
    """
    allowed = set(candidates)
    best: list[int] = []

    for start in candidates:
        parents: dict[int, int] = {}
        queue = deque([start])
        closing: int | None = None
        while queue and closing is None:
            node = queue.popleft()
            for after in sorted(adjacency[node]):
                if after not in allowed:
                    continue
                if after == start:
                    closing = node
                    break
                if after not in parents:
                    parents[after] = node
                    queue.append(after)

        if closing is None:
            continue

        path = [closing]
        while path[-1] != start:
            path.append(parents[path[-1]])
        path.reverse()
        if not best or len(path) < len(best):
            best = path

    return best
