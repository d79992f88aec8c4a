from __future__ import annotations
import sys
from mdworkbench.app import run_app


def main() -> int:
    """Module entrypoint for `python -m mdworkbench` and the `md-workbench` script."""
    return run_app(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main())
