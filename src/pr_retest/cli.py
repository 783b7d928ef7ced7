"""
Command line entry point.

Runs the retest action against the current Actions runner environment.
"""

import argparse
import sys
from typing import List, Optional

from .api import run


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pr-retest",
        description="Rerun failed workflow runs of a pull request when /retest is commented.",
    )
    parser.add_argument("--config", help="YAML configuration file")
    args = parser.parse_args(argv)

    return run(config_path=args.config)


if __name__ == "__main__":
    sys.exit(main())
