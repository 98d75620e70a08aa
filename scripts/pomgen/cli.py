"""CLI entry point and file I/O.

Wires together descriptor parsing and POM generation: reads a project
descriptor, renders ``pom.xml`` and either prints it or writes it out.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .pom_writer import PomWriter
from .project_parser import ProjectDescriptorError, parse_project


def generate(
    descriptor: Path,
    output_path: Optional[Path] = None,
    dry_run: bool = False,
    xml_declaration: bool = True,
    indent: int = 4,
):
    """Generate ``pom.xml`` from a project descriptor.

    Args:
        descriptor: Path to the ``.toml`` or ``.json`` descriptor.
        output_path: File to write. Defaults to ``pom.xml`` next to the
            descriptor.
        dry_run: If ``True``, prints the document to stdout instead of
            writing it.
        xml_declaration: Whether to write the ``<?xml ...?>`` prologue.
        indent: Number of spaces per nesting level.
    """
    try:
        build = parse_project(descriptor)
    except ProjectDescriptorError as ex:
        print(f"ERROR: {ex}", file=sys.stderr)
        sys.exit(1)

    writer = PomWriter(xml_declaration=xml_declaration, indent=" " * indent)
    if dry_run:
        print(writer.to_xml(build), end="")
        return

    out = output_path or descriptor.parent / "pom.xml"
    writer.write_file(build, out)
    print(f"  ✓ {out}")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``.

    Returns:
        Namespace with ``descriptor``, ``output``, ``dry_run``,
        ``xml_declaration`` and ``indent``.
    """
    parser = argparse.ArgumentParser(
        description="Generate a Maven pom.xml from a project descriptor"
    )
    parser.add_argument("descriptor", type=Path, help="Path to the .toml or .json project descriptor")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Output file (default: pom.xml next to the descriptor)")
    parser.add_argument("--dry-run", "-n", action="store_true", help="Print output without writing files")
    parser.add_argument("--no-xml-declaration", dest="xml_declaration", action="store_false",
                        help="Omit the <?xml ...?> prologue")
    parser.add_argument("--indent", type=int, default=4, help="Spaces per nesting level (default: 4)")
    args = parser.parse_args(argv)
    if args.indent < 0:
        parser.error("--indent must not be negative")
    return args


def main(argv: Optional[list[str]] = None):
    """CLI entry point. Parses arguments and delegates to ``generate()``."""
    args = parse_args(argv)
    generate(args.descriptor, args.output, args.dry_run, args.xml_declaration, args.indent)
