"""Entry point for `python -m codepulse`."""

import sys


def main():
    from codepulse.app import run
    sys.exit(run())


if __name__ == "__main__":
    main()
