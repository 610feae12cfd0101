"""CLI entry point for mermaid-sequence."""

import logging
import sys

import click

from mermaid_sequence.config import ParseConfig, SerializeConfig
from mermaid_sequence.ir.activations import activation_spans
from mermaid_sequence.ir.graph import InteractionGraph
from mermaid_sequence.ir.model import DiagramModel
from mermaid_sequence.parsers import parse
from mermaid_sequence.renderers.mermaid import serialize


def _summary(model: DiagramModel) -> str:
    graph = InteractionGraph.from_model(model)
    lines = [
        f"participants: {graph.participant_count()}",
        f"messages: {graph.message_count()}",
        f"notes: {len(model.notes())}",
        f"blocks: {len(model.blocks())}",
        f"activations: {len(activation_spans(model))}",
    ]
    busiest = graph.busiest_participant()
    if busiest is not None and graph.message_count():
        lines.append(f"busiest: {busiest}")
    isolated = graph.isolated_participants()
    if isolated:
        lines.append(f"isolated: {', '.join(isolated)}")
    return "\n".join(lines) + "\n"


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--indent", "-i", "indent", type=click.IntRange(min=0), default=4, help="Spaces per nesting level")
@click.option("--check", is_flag=True, help="Exit with status 1 if the input is not already canonical")
@click.option("--strict", is_flag=True, help="Treat recoverable diagnostics as errors")
@click.option("--summary", is_flag=True, help="Print participant/message counts instead of the diagram")
@click.option("--verbose", "-v", is_flag=True, help="Log parser decisions to stderr")
def main(
    input: str | None,
    output: str | None,
    indent: int,
    check: bool,
    strict: bool,
    summary: bool,
    verbose: bool,
) -> None:
    """Mermaid sequenceDiagram formatter: parse and re-emit canonical text."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        model = parse(text, ParseConfig(strict=strict))
    except ValueError as e:
        click.echo(f"parse error:\n{e}", err=True)
        sys.exit(1)

    for diagnostic in model.diagnostics:
        click.echo(f"warning: {diagnostic}", err=True)

    canonical = serialize(model, SerializeConfig(indent=indent))
    if check:
        if canonical != text:
            click.echo(f"{input or '<stdin>'}: not canonical", err=True)
            sys.exit(1)
        return

    rendered = _summary(model) if summary else canonical

    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
