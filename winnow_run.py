#!/usr/bin/env python
import os
import sys
import argparse
from pathlib import Path

from loguru import logger

from winnow import Runtime, WinnowError, __version__
from winnow.errors import InputExhaustedError
from winnow.parser import build_nodes, parse
from winnow.semantic import ScriptAnalyzer
from winnow.streams import ConsoleSink, ConsoleSource

DEFAULT_INPUT_FILE = "input.txt"


def configure_logging(level: str) -> None:
    logger.remove()
    logger.enable("winnow")
    logger.add(sys.stderr, level=level.upper(), format="<level>{level: <8}</level> {message}")


def configure_tracing() -> None:
    from opentelemetry import trace
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    trace.set_tracer_provider(provider)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="winnow - run a branching dialog script")
    parser.add_argument(
        "script",
        nargs="?",
        default=os.getenv("WINNOW_SCRIPT", DEFAULT_INPUT_FILE),
        help=f"Path of the script file (default: $WINNOW_SCRIPT or {DEFAULT_INPUT_FILE})",
    )
    parser.add_argument("--check", action="store_true", help="Parse and analyze the script, then exit")
    parser.add_argument(
        "--trace",
        action="store_true",
        default=os.getenv("WINNOW_TRACE") == "1",
        help="Print OpenTelemetry spans to stderr",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("WINNOW_LOG_LEVEL", "WARNING"),
        help="Log level for diagnostics on stderr (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"winnow {__version__}")
    return parser


def check(path: Path) -> int:
    try:
        nodes = build_nodes(parse(path.read_text(encoding="utf-8")))
        analyzer = ScriptAnalyzer(nodes)
        analyzer.analyze()
    except (OSError, WinnowError) as e:
        print(f"[Error] {e}")
        return 1
    summary = analyzer.graph.summary()
    print(f"{path}: {summary['nodes']} node(s), {summary['reachable']} reachable, "
          f"{len(analyzer.warnings)} warning(s)")
    return 0


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)
    if args.trace:
        configure_tracing()

    path = Path(args.script)
    if args.check:
        return check(path)

    print(f"winnow {__version__}")
    print(f"Input file: {path}\n")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"[Error] Could not read script '{path}': {e}")
        return 1

    with ConsoleSink() as sink:
        rt = Runtime(source=ConsoleSource(), sink=sink)
        try:
            rt.load(text)
        except WinnowError as e:
            print(f"[Error] {e}")
            return 1
        try:
            rt.run()
        except InputExhaustedError:
            sink.report("\nInput closed before the dialog finished")
            return 1
        except WinnowError as e:
            sink.report(f"[Error] {e}")
            return 1
        except KeyboardInterrupt:
            sink.report("")
            return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
