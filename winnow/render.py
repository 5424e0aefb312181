from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from .env import Environment
from .errors import RuntimeFlowError
from .types import BranchingNode, QuestionNode, TerminatingNode

QUESTION_CUE = "Enter string> "
CHOICE_CUE = "Enter choice> "
EXIT_CUE = "Goodbye (enter anything to exit)> "


@dataclass
class Prompt:
    """What to show for the current state, independent of how it is painted."""
    kind: str
    text: str
    cue: str
    options: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.kind == "branching":
            listing = "".join(f"{i}. {opt}\n" for i, opt in enumerate(self.options, start=1))
            return f"{self.text}\n{listing}\n{self.cue}"
        return f"{self.text}\n{self.cue}"


def describe(node, env: Environment, attempt: int = 0) -> Prompt:
    if isinstance(node, QuestionNode):
        if attempt >= len(node.prompts):
            raise RuntimeFlowError(f"Question has no prompt #{attempt + 1}")
        return Prompt("question", env.resolve_template(node.prompts[attempt]), QUESTION_CUE)
    if isinstance(node, BranchingNode):
        return Prompt(
            "branching",
            env.resolve_template(node.question),
            CHOICE_CUE,
            [opt.text for opt in node.options],
        )
    if isinstance(node, TerminatingNode):
        return Prompt("terminating", env.resolve_template(node.message), EXIT_CUE)
    raise RuntimeFlowError(f"Cannot render node of type {type(node).__name__}")
