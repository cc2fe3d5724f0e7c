"""Allow running keyfleet as ``python -m keyfleet``."""

from keyfleet.cli import main

if __name__ == "__main__":
    main()
