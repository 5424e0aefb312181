"""
ScriptGraph: networkx view of a script's transitions.

Vertices are node ids plus the TERMINATING sentinel; an edge u -> v means
some answer at u moves the session to v. Used for reachability checks
before a session starts.
"""

from typing import Any, Dict, List, Set

import networkx as nx

from .types import TERMINATING, NodeList


class ScriptGraph:
    """Directed transition graph of a NodeList. Cycles are allowed."""

    def __init__(self, nodes: NodeList):
        self.nodes = nodes
        self.graph: nx.DiGraph = nx.DiGraph()
        self.graph.add_node(TERMINATING, kind="end")
        for node_id, node in enumerate(nodes.nodes):
            self.graph.add_node(node_id, kind=node.kind)
        for node_id, node in enumerate(nodes.nodes):
            for dest in node.destinations():
                self.graph.add_edge(node_id, dest)

    # ─── Reachability ────────────────────────────────────────────

    def reachable(self, start: int = 0) -> Set[int]:
        """Node ids reachable from ``start`` (inclusive), sentinel excluded."""
        if start not in self.graph:
            return set()
        found = nx.descendants(self.graph, start) | {start}
        found.discard(TERMINATING)
        return found

    def unreachable(self, start: int = 0) -> List[int]:
        seen = self.reachable(start)
        return [nid for nid in range(len(self.nodes)) if nid not in seen]

    def can_terminate(self, node_id: int) -> bool:
        return nx.has_path(self.graph, node_id, TERMINATING)

    def trapped(self) -> List[int]:
        """Nodes from which no sequence of answers ends the session."""
        if TERMINATING not in self.graph:
            return list(range(len(self.nodes)))
        exits = nx.ancestors(self.graph, TERMINATING)
        return [nid for nid in range(len(self.nodes)) if nid not in exits]

    def shortest_exit(self, start: int = 0) -> List[int]:
        """Shortest id path from ``start`` to the sentinel, or [] if none."""
        try:
            return nx.shortest_path(self.graph, start, TERMINATING)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return []

    def summary(self) -> Dict[str, Any]:
        return {
            "nodes": len(self.nodes),
            "edges": self.graph.number_of_edges(),
            "reachable": len(self.reachable()),
            "has_cycles": not nx.is_directed_acyclic_graph(self.graph),
        }
