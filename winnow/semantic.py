from __future__ import annotations
from typing import List

from loguru import logger

from .errors import SemanticError
from .graph import ScriptGraph
from .types import NodeList


class ScriptAnalyzer:
    """Checks a parsed script before it is run:
    - the script defines at least one node (sessions start at node 0)
    - unreachable nodes are reported as warnings
    - nodes with no path to a terminating node are reported as warnings
    Dangling destinations are already rejected when the NodeList is built.
    """

    def __init__(self, nodes: NodeList):
        self.nodes = nodes
        self.graph = ScriptGraph(nodes)
        self.warnings: List[str] = []

    def analyze(self) -> None:
        if len(self.nodes) == 0:
            raise SemanticError("Script defines no nodes")

        for node_id in self.graph.unreachable():
            self._warn(f"node {node_id}{self._where(node_id)} is unreachable from node 0")

        reachable = self.graph.reachable()
        for node_id in self.graph.trapped():
            if node_id in reachable:
                self._warn(f"node {node_id}{self._where(node_id)} has no path to a terminating node")

    def _where(self, node_id: int) -> str:
        line = self.nodes[node_id].line
        return f" (line {line})" if line is not None else ""

    def _warn(self, msg: str) -> None:
        self.warnings.append(msg)
        logger.warning(msg)
