"""Module entrypoint for running dectalkbot as ``python -m dectalkbot``."""

from __future__ import annotations

from dectalkbot.cli import main


if __name__ == "__main__":
    main()
