"""Translate a simple-form trace into a Dimple Java program."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from tracedimple.config import TranslatorConfig
from tracedimple.target.emitter import render_source_file
from tracedimple.translator import Translator


SAMPLE_TRACE = """
var ab0 = random('wrapped_flip', [0.5, JSON.parse('null')]);
var ab1 = random('wrapped_flip', [0.3, JSON.parse('null')]);
var ab2 = and(ab0, ab1);
condition(ab2);
if (ab0) { var ab3 = ab1; } else { var ab3 = ab2; }
ab3
"""


def trace_to_java(source: str, *, class_name: str, num_iterations: int) -> str:
    config = TranslatorConfig(num_iterations=num_iterations)
    code = Translator(config=config).translate(source)
    return render_source_file(code, class_name=class_name, graph_name=config.graph_name)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("trace", nargs="?", help="Trace file; a built-in sample is used if omitted")
    parser.add_argument("--class-name", default="DimpleModel")
    parser.add_argument("--iterations", type=int, default=10000)
    parser.add_argument("--output", "-o", help="Write the Java source here instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    source = Path(args.trace).read_text() if args.trace else SAMPLE_TRACE
    java = trace_to_java(source, class_name=args.class_name, num_iterations=args.iterations)
    if args.output:
        Path(args.output).write_text(java)
    else:
        print(java)


if __name__ == "__main__":
    main()
