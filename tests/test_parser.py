"""
Unit tests for the winnow parser.
Tests parse(), build_nodes() and ParseError from winnow.parser.
"""
import pytest

from winnow.parser import build_nodes, parse, parse_script, ParseError
from winnow.errors import SemanticError
from winnow.types import TERMINATING, BranchingNode, QuestionNode, TerminatingNode


def test_parse_question_record():
    """Test a question record with several prompts."""
    nodes = build_nodes(parse("1\n0\n9999\nNAME\nFirst?\nSecond?\n"))

    assert len(nodes) == 1
    node = nodes[0]
    assert isinstance(node, QuestionNode)
    assert node.success == 0
    assert node.fail == TERMINATING
    assert node.variable == "NAME"
    assert node.prompts == ("First?", "Second?")
    assert node.line == 1


def test_parse_question_without_prompts():
    nodes = build_nodes(parse("1\n1\n1\nNAME\n3\nBye\n"))
    assert nodes[0].prompts == ()
    assert isinstance(nodes[1], TerminatingNode)


def test_parse_branching_with_three_options():
    """Option count is not limited to two."""
    src = (
        "2\nCOLOR\nPick a colour\n"
        "Red:1\nGreen:1\nBlue:2\n"
        "3\nYou chose $COLOR\n"
        "3\nCold\n"
    )
    nodes = build_nodes(parse(src))

    node = nodes[0]
    assert isinstance(node, BranchingNode)
    assert node.variable == "COLOR"
    assert node.question == "Pick a colour"
    assert [(o.text, o.destination) for o in node.options] == [("Red", 1), ("Green", 1), ("Blue", 2)]


def test_node_ids_follow_record_order(quest_script):
    nodes = build_nodes(parse(quest_script))
    kinds = [n.kind for n in nodes.nodes]
    assert kinds == ["question", "branching", "branching", "terminating", "terminating", "terminating"]
    lines = [n.line for n in nodes.nodes]
    assert lines == sorted(lines)


def test_prompt_list_ends_at_next_tag():
    nodes = build_nodes(parse("1\n1\n1\nX\nprompt one\n42\n3\nbye\n"))
    assert nodes[0].prompts == ("prompt one", "42")
    assert nodes[1].message == "bye"


def test_crlf_line_endings_are_stripped():
    nodes = build_nodes(parse("1\r\n1\r\n1\r\nNAME\r\nWho?\r\n3\r\nBye $NAME\r\n"))
    assert nodes[0].variable == "NAME"
    assert nodes[0].prompts == ("Who?",)
    assert nodes[1].message == "Bye $NAME"


def test_text_is_not_trimmed():
    nodes = build_nodes(parse("3\n  spaced out  \n"))
    assert nodes[0].message == "  spaced out  "


def test_missing_final_newline():
    nodes = build_nodes(parse("3\nThe end"))
    assert nodes[0].message == "The end"


def test_blank_lines_are_skipped():
    nodes = build_nodes(parse("\n3\nfirst\n\n\n3\nsecond\n\n"))
    assert [n.message for n in nodes.nodes] == ["first", "second"]


def test_branching_question_may_look_like_a_tag():
    nodes = build_nodes(parse("2\nN\n3\nthree:1\n3\nok\n"))
    assert nodes[0].question == "3"


def test_empty_script_parses_to_no_nodes():
    assert len(build_nodes(parse(""))) == 0


def test_parse_errors():
    """Test malformed scripts raise ParseError."""
    # Unknown tag
    with pytest.raises(ParseError):
        parse("4\nhello\n")

    # Integer field that is not an integer
    with pytest.raises(ParseError):
        parse("1\none\n2\nNAME\nWho?\n")

    # Branching without options
    with pytest.raises(ParseError):
        parse("2\nNAME\nWhich?\n")

    # Option without a destination
    with pytest.raises(ParseError):
        parse("2\nNAME\nWhich?\nRed\n")

    # Option text containing the delimiter
    with pytest.raises(ParseError):
        parse("2\nNAME\nWhich?\nRed:Blue:1\n")

    # Terminating record without a message
    with pytest.raises(ParseError):
        parse("3\n")

    # Trailing text after a tag
    with pytest.raises(ParseError):
        parse("3 \nbye\n")


def test_parse_error_reports_position():
    with pytest.raises(ParseError) as info:
        parse("3\nbye\nnot a tag\n")
    assert info.value.line == 3
    assert "line 3" in str(info.value)


def test_dangling_destination_is_rejected():
    with pytest.raises(SemanticError, match="missing node 5"):
        parse_script("1\n5\n1\nNAME\nWho?\n3\nbye\n")


def test_empty_script_is_rejected_by_parse_script():
    with pytest.raises(SemanticError, match="no nodes"):
        parse_script("")


def test_parse_script_accepts_path(examples_dir):
    nodes = parse_script(examples_dir / "quest.txt")
    assert len(nodes) == 6


def test_node_count_must_stay_below_terminating_id():
    src = "1\n9999\n9999\nX\nq?\n" + "3\nbye\n" * 10000
    with pytest.raises(SemanticError, match="at most 9999"):
        parse_script(src)
