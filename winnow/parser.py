from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput
from loguru import logger
from opentelemetry import trace
from pydantic import ValidationError

from .errors import ParseError, SemanticError
from .semantic import ScriptAnalyzer
from .types import BranchingNode, BranchOption, NodeList, QuestionNode, TerminatingNode

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

_tracer = trace.get_tracer(__name__)

_parser = None

_TERMINAL_NAMES = {
    "QUESTION_TAG": "a record tag (1, 2 or 3)",
    "BRANCHING_TAG": "a record tag (1, 2 or 3)",
    "TERMINATING_TAG": "a record tag (1, 2 or 3)",
    "INT_LINE": "an integer line",
    "TEXT_LINE": "a text line",
    "OPTION_LINE": "an option line '<text>:<destination>'",
    "$END": "end of script",
}

def _load_parser() -> Lark:
    global _parser
    if _parser is None:
        grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
        _parser = Lark(grammar, start="start", parser="lalr", propagate_positions=True)
    return _parser

def _strip_newline(token: Token) -> str:
    return str(token).rstrip("\r\n")

def _expected(names: Optional[Iterable[str]]) -> str:
    described = sorted({_TERMINAL_NAMES.get(n, n) for n in (names or ())})
    return " or ".join(described) if described else "nothing"

def _describe(err: UnexpectedInput) -> str:
    expected = getattr(err, "expected", None) or getattr(err, "allowed", None)
    line = getattr(err, "line", -1)
    where = f"line {line}, col {err.column}" if line and line > 0 else "end of script"
    return f"{where}: expected {_expected(expected)}"

def parse(source: str | Path) -> Tree:
    """Parse script text (or the file at a Path) into a lark tree."""
    text = source.read_text(encoding="utf-8") if isinstance(source, Path) else source
    if text and not text.endswith("\n"):
        text += "\n"
    try:
        return _load_parser().parse(text)
    except UnexpectedInput as e:
        line = getattr(e, "line", None)
        raise ParseError(
            _describe(e),
            line=line if line and line > 0 else None,
            column=getattr(e, "column", None),
        ) from e

def _build_question(node: Tree):
    tag, success, fail, variable, *prompts = node.children
    return QuestionNode(
        success=int(_strip_newline(success)),
        fail=int(_strip_newline(fail)),
        variable=_strip_newline(variable),
        prompts=tuple(_strip_newline(p) for p in prompts),
        line=tag.line,
    )

def _build_branching(node: Tree):
    tag, variable, question, *option_lines = node.children
    options: List[BranchOption] = []
    for opt in option_lines:
        text, _, dest = _strip_newline(opt).rpartition(":")
        options.append(BranchOption(text=text, destination=int(dest)))
    return BranchingNode(
        variable=_strip_newline(variable),
        question=_strip_newline(question),
        options=tuple(options),
        line=tag.line,
    )

def _build_terminating(node: Tree):
    tag, message = node.children
    return TerminatingNode(message=_strip_newline(message), line=tag.line)

_BUILDERS = {
    "question": _build_question,
    "branching": _build_branching,
    "terminating": _build_terminating,
}

def build_nodes(tree: Tree) -> NodeList:
    """Convert a parse tree into a NodeList, numbering records from 0."""
    nodes = []
    for record in tree.children:
        build = _BUILDERS.get(record.data)
        if build is None:
            raise ParseError(f"Cannot handle record '{record.data}'")
        nodes.append(build(record))
    try:
        return NodeList(nodes=tuple(nodes))
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise SemanticError(messages) from e

def parse_script(source: str | Path) -> NodeList:
    """Parse, build and analyze a script. The result is ready to run."""
    with _tracer.start_as_current_span("winnow.parse") as span:
        nodes = build_nodes(parse(source))
        ScriptAnalyzer(nodes).analyze()
        span.set_attribute("winnow.nodes", len(nodes))
    logger.debug("Parsed script with {} node(s)", len(nodes))
    return nodes
