"""
Test configuration and fixtures for the winnow test suite.
"""
import sys
import pytest
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from winnow.runtime import Runtime
from winnow.streams import BufferSink, ScriptedSource


@pytest.fixture(scope="session")
def examples_dir() -> Path:
    """Return the path to the bundled example scripts."""
    return Path(__file__).resolve().parents[1] / "examples"


@pytest.fixture
def quest_script(examples_dir) -> str:
    """Return the text of the bundled quest dialog."""
    return (examples_dir / "quest.txt").read_text(encoding="utf-8")


@pytest.fixture
def name_script() -> str:
    """A question whose success and fail paths end at nodes 1 and 3."""
    return (
        "1\n1\n3\nNAME\n"
        "What is your name?\n"
        "Please tell me your name\n"
        "You better tell me your name\n"
        "3\nGoodbye $NAME\n"
        "3\nYou found a secret\n"
        "3\nNo name given\n"
    )


@pytest.fixture
def make_runtime():
    """Build a runtime over a script, fed by a list of answer lines."""
    def _make(script, answers=()):
        sink = BufferSink()
        rt = Runtime(source=ScriptedSource(answers), sink=sink)
        rt.load(script)
        return rt, sink
    return _make
