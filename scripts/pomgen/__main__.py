"""Generate a Maven pom.xml from a project descriptor.

Usage:
    python -m pomgen <descriptor> [--output <pom.xml>] [--dry-run]
    python -m pomgen <descriptor> --no-xml-declaration --indent 2

If --output is omitted, pom.xml is written next to the descriptor.
If --dry-run is given, the document is printed to stdout instead.
"""

from .cli import main

if __name__ == "__main__":
    main()
