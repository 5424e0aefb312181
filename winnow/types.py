"""Node model for winnow scripts.

A script is an ordered list of nodes. A node's position in the list is its
NodeId; the reserved TERMINATING id marks a halted session and never
indexes the list.
"""

from __future__ import annotations
from typing import Annotated, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

NodeId = Annotated[int, Field(ge=0)]

TERMINATING: int = 9999


class BranchOption(BaseModel):
    """One selectable answer of a branching node."""
    model_config = ConfigDict(frozen=True)

    text: str
    destination: NodeId


class QuestionNode(BaseModel):
    """Free-text capture. Prompts are shown in order on each blank answer."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["question"] = "question"
    success: NodeId
    fail: NodeId
    variable: str
    prompts: Tuple[str, ...] = ()
    line: Optional[int] = None

    def destinations(self) -> List[int]:
        return [self.success, self.fail]


class BranchingNode(BaseModel):
    """Multiple choice; the chosen option's text is bound to ``variable``."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["branching"] = "branching"
    variable: str
    question: str
    options: Tuple[BranchOption, ...] = Field(min_length=1)
    line: Optional[int] = None

    def destinations(self) -> List[int]:
        return [opt.destination for opt in self.options]


class TerminatingNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["terminating"] = "terminating"
    message: str
    line: Optional[int] = None

    @property
    def variable(self) -> None:
        return None

    def destinations(self) -> List[int]:
        return [TERMINATING]


Node = Annotated[Union[QuestionNode, BranchingNode, TerminatingNode], Field(discriminator="kind")]


class NodeList(BaseModel):
    """Immutable, position-indexed sequence of nodes."""
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[Node, ...] = ()

    @model_validator(mode="after")
    def check_destinations(self) -> "NodeList":
        count = len(self.nodes)
        if count > TERMINATING:
            raise ValueError(f"script defines {count} nodes; at most {TERMINATING} are allowed")
        for node_id, node in enumerate(self.nodes):
            for dest in node.destinations():
                if dest != TERMINATING and dest >= count:
                    where = f" (line {node.line})" if node.line is not None else ""
                    raise ValueError(
                        f"node {node_id}{where} refers to missing node {dest}; "
                        f"script defines {count} node(s)"
                    )
        return self

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, node_id: int) -> Union[QuestionNode, BranchingNode, TerminatingNode]:
        if node_id == TERMINATING:
            raise IndexError("the terminating id does not name a node")
        return self.nodes[node_id]

    def destinations(self, node_id: int) -> List[int]:
        return self[node_id].destinations()
