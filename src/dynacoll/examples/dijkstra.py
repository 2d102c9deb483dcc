#!/usr/bin/env python3
"""
Dijkstra's Algorithm on dynacoll Containers

The graph is a Dict from node to a Set of Edge dataclasses. Edges are
plain dataclasses, not hashable Python objects, which is fine for Set since
membership goes through content hashes.

Sample graph:

          3
      a ----- b
      |     /
    1 |   / 1
      | /
      c       d

Output:
    a -> a: distance = 0,    path = [a]
    a -> b: distance = 2,    path = [a c b]
    a -> c: distance = 1,    path = [a c]
    a -> d: distance = inf,  path = []

Usage:
    python -m dynacoll.examples.dijkstra [--start NODE]
"""

from __future__ import annotations
import argparse
import math
from dataclasses import dataclass
from typing import Any, List as ListType, Optional, Tuple as TupleType

from ..hashdict import Dict
from ..hashset import Set
from ..sequence import List

UNVISITED = math.inf


@dataclass
class Edge:
    """Directed edge to node with a non-negative weight."""
    node: str
    weight: int


def sample_graph() -> Dict:
    """The four-node graph from the module docstring."""
    return Dict.from_key_values(
        ["a", "b", "c", "d"],
        [
            Set.from_values(Edge("b", 3), Edge("c", 1)),
            Set.from_values(Edge("a", 3), Edge("c", 1)),
            Set.from_values(Edge("a", 1), Edge("b", 1)),
            Set(),
        ],
    )


def _closest(unvisited: Dict) -> TupleType[Any, float]:
    """Return the unvisited node with the smallest tentative distance."""
    best_node, best_distance = None, None
    for node, distance in unvisited.iterate_items():
        if best_distance is None or distance < best_distance:
            best_node, best_distance = node, distance
    return best_node, best_distance


def shortest_paths(graph: Dict, start: Any) -> TupleType[Dict, Dict]:
    """
    Run Dijkstra's algorithm from start.

    Returns:
        (distances, parents): distances maps every node of graph to its
        distance from start (inf when unreachable); parents maps every
        reached node except start to its predecessor on a shortest path.
    """
    unvisited = Dict.from_key_values(graph.keys(), [UNVISITED] * len(graph))
    unvisited.set(start, 0)

    visited = Dict()
    parents = Dict()

    while len(unvisited) > 0:
        node, distance = _closest(unvisited)

        neighbours = graph.get(node)
        for edge in (neighbours.iterate() if neighbours is not None else ()):
            if visited.contains(edge.node):
                continue
            current = unvisited.get(edge.node)
            candidate = distance + edge.weight
            if current is not None and candidate < current:
                unvisited.set(edge.node, candidate)
                parents.set(edge.node, node)

        visited.set(node, distance)
        unvisited.remove(node)

    return visited, parents


def path_to(start: Any, end: Any, parents: Dict) -> List:
    """Walk parents back from end. Empty when end is unreachable."""
    current = end
    path = List.from_values(end)
    while current != start:
        current = parents.get(current)
        if current is None:
            return List()
        path.append(current)
    return path.reverse()


def render(start: Any, nodes: ListType[Any], distances: Dict, parents: Dict) -> ListType[str]:
    """One line per node, in the order given."""
    lines = []
    for end in nodes:
        distance = distances.get(end)
        if distance == UNVISITED:
            lines.append(f"{start} -> {end}: distance = inf,\tpath = []")
        else:
            path = path_to(start, end, parents)
            lines.append(f"{start} -> {end}: distance = {distance},\tpath = {path}")
    return lines


def main(argv: Optional[ListType[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Shortest paths over a graph stored in dynacoll containers"
    )
    parser.add_argument('--start', default='a', help='start node (default: a)')
    args = parser.parse_args(argv)

    graph = sample_graph()
    if not graph.contains(args.start):
        parser.error(f"unknown start node: {args.start}")

    distances, parents = shortest_paths(graph, args.start)
    for line in render(args.start, ["a", "b", "c", "d"], distances, parents):
        print(line)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
