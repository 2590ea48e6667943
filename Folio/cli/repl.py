"""Interactive admin console for Folio."""

from __future__ import annotations

import shlex
import sys
from typing import List, Optional

from ..config.settings import get_settings
from ..sync.repository import PortfolioRepository, build_repository
from .commands import HELP_TEXT, handle_command


def run_repl(repo: PortfolioRepository) -> None:
    print()
    print(HELP_TEXT)

    while True:
        try:
            cmd = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        should_continue, _info = handle_command(repo, cmd, input_line=lambda: input())
        if not should_continue:
            break


def main(argv: Optional[List[str]] = None) -> int:
    """Run one command from the arguments, or the console without any."""
    argv = sys.argv[1:] if argv is None else argv
    repo = build_repository(get_settings())

    if not argv:
        run_repl(repo)
        return 0

    _, info = handle_command(repo, shlex.join(argv), input_line=lambda: input())
    return 0 if info.get("ok", True) else 1
