"""Entry point: python -m wxapigen -i spec.yaml -o api.js"""

from __future__ import annotations

from .cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
