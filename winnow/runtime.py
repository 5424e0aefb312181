from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger
from opentelemetry import trace

from .env import Environment
from .errors import InputExhaustedError, InvalidChoice, RuntimeFlowError
from .parser import parse_script
from .render import Prompt, describe
from .streams import ConsoleSink, ConsoleSource, LineSink, LineSource
from .types import TERMINATING, BranchingNode, BranchOption, NodeList, QuestionNode, TerminatingNode

_tracer = trace.get_tracer(__name__)


@dataclass
class ExecutionState:
    env: Environment = field(default_factory=Environment)
    current: int = 0
    # index of the prompt shown at the current question node
    attempt: int = 0

    @property
    def halted(self) -> bool:
        return self.current == TERMINATING

    def transition(self, destination: int) -> None:
        self.current = destination
        self.attempt = 0


class Runtime:
    """Walks a NodeList one answer at a time.

    Each step renders the current node to the sink, reads one line from the
    source and computes the next state. The session ends when the current
    node is TERMINATING.
    """

    def __init__(self, source: Optional[LineSource] = None, sink: Optional[LineSink] = None):
        self.nodes: Optional[NodeList] = None
        self.source = source if source is not None else ConsoleSource()
        self.sink = sink if sink is not None else ConsoleSink()
        self.state = ExecutionState()
        self.last_prompt: Optional[Prompt] = None
        self.tracer = _tracer
        self.metrics: Dict[str, Any] = {"steps": 0, "transitions": 0, "invalid_inputs": 0, "visits": {}}

    def load(self, source: Union[str, Path, NodeList]) -> NodeList:
        self.nodes = source if isinstance(source, NodeList) else parse_script(source)
        self.start()
        return self.nodes

    @property
    def env(self) -> Environment:
        return self.state.env

    @property
    def current_node(self):
        if self.nodes is None:
            raise RuntimeFlowError("No script loaded")
        if self.state.halted:
            return None
        try:
            return self.nodes[self.state.current]
        except IndexError:
            raise RuntimeFlowError(f"Node {self.state.current} does not exist") from None

    # ---------- Execution entry ----------
    def start(self) -> None:
        """Begin a fresh session at node 0 with an empty environment."""
        self.state = ExecutionState()
        self.last_prompt = None
        self.metrics = {"steps": 0, "transitions": 0, "invalid_inputs": 0, "visits": {0: 1}}

    def run(self) -> Environment:
        if self.nodes is None:
            raise RuntimeFlowError("No script loaded")
        with self.tracer.start_as_current_span("winnow.session") as span:
            while not self.state.halted:
                self.step()
            span.set_attribute("winnow.steps", self.metrics["steps"])
        logger.debug("Session finished after {} step(s)", self.metrics["steps"])
        return self.state.env

    def step(self) -> None:
        node = self.current_node
        if node is None:
            raise RuntimeFlowError("Session already finished")
        self.metrics["steps"] += 1
        with self.tracer.start_as_current_span("winnow.step") as span:
            span.set_attribute("winnow.node.id", self.state.current)
            span.set_attribute("winnow.node.kind", node.kind)
            span.set_attribute("winnow.attempt", self.state.attempt)
            if isinstance(node, QuestionNode):
                self._step_question(node)
            elif isinstance(node, BranchingNode):
                self._step_branching(node)
            elif isinstance(node, TerminatingNode):
                self._step_terminating(node)
            else:
                raise RuntimeFlowError(f"Unknown node type {type(node).__name__}")
        self.sink.write("\n")

    # ---------- Node handlers ----------
    def _step_question(self, node: QuestionNode) -> None:
        if self.state.attempt >= len(node.prompts):
            # no prompts left to show, including a node declared without any
            self._transition(node.fail)
            return
        self._show(describe(node, self.state.env, self.state.attempt))
        line = self._read_answer()
        if not line:
            self.state.attempt += 1
            if self.state.attempt >= len(node.prompts):
                self._transition(node.fail)
            return
        self._bind(node.variable, line)
        self._transition(node.success)

    def _step_branching(self, node: BranchingNode) -> None:
        self._show(describe(node, self.state.env))
        line = self._read_answer()
        try:
            option = self._choose(node, line)
        except InvalidChoice as e:
            self.metrics["invalid_inputs"] += 1
            logger.debug("Rejected choice {!r} at node {}: {}", line, self.state.current, e)
            self.sink.report(str(e))
            return
        self._bind(node.variable, option.text)
        self._transition(option.destination)

    def _step_terminating(self, node: TerminatingNode) -> None:
        self._show(describe(node, self.state.env))
        # pacing only; content and end of stream are both accepted
        self.source.read_line()
        self._transition(TERMINATING)

    # ---------- Helpers ----------
    @staticmethod
    def _choose(node: BranchingNode, line: str) -> BranchOption:
        if not line:
            raise InvalidChoice("No choice entered")
        if not (line.isascii() and line.isdigit()):
            raise InvalidChoice(f"Unrecognized input: {line}")
        choice = int(line)
        if not 1 <= choice <= len(node.options):
            raise InvalidChoice("Not a valid option!")
        return node.options[choice - 1]

    def _show(self, prompt: Prompt) -> None:
        self.last_prompt = prompt
        self.sink.write(str(prompt))

    def _read_answer(self) -> str:
        raw = self.source.read_line()
        if raw is None:
            raise InputExhaustedError(f"Input closed while waiting at node {self.state.current}")
        return raw.rstrip("\r\n")

    def _bind(self, name: str, value: str) -> None:
        self.state.env.set(name, value)
        logger.debug("Set {} = {!r}", name, value)

    def _transition(self, destination: int) -> None:
        logger.debug("Transition {} -> {}", self.state.current, destination)
        self.state.transition(destination)
        self.metrics["transitions"] += 1
        if destination != TERMINATING:
            visits = self.metrics["visits"]
            visits[destination] = visits.get(destination, 0) + 1
