# File: blueprintgen/__main__.py
"""
Blueprintgen - Module entry point.

Allows running the generator directly via::

    python -m blueprintgen --draft draft.yaml --output ./my-app
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from blueprintgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
