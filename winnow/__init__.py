"""winnow: branching dialog scripts driven one line of input at a time."""

from loguru import logger

from .env import Environment
from .errors import (
    InputExhaustedError,
    InvalidChoice,
    ParseError,
    RuntimeFlowError,
    SemanticError,
    WinnowError,
)
from .parser import parse, parse_script
from .runtime import ExecutionState, Runtime
from .types import TERMINATING, BranchingNode, BranchOption, NodeList, QuestionNode, TerminatingNode

__version__ = "0.1.0"

logger.disable("winnow")

__all__ = [
    "BranchOption",
    "BranchingNode",
    "Environment",
    "ExecutionState",
    "InputExhaustedError",
    "InvalidChoice",
    "NodeList",
    "ParseError",
    "QuestionNode",
    "Runtime",
    "RuntimeFlowError",
    "SemanticError",
    "TERMINATING",
    "TerminatingNode",
    "WinnowError",
    "parse",
    "parse_script",
]
