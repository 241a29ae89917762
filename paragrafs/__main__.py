"""Package entry point for ``python -m paragrafs``.

WHY: Users run the tool as ``python -m paragrafs format input.json``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

RULES:
- This file must exist for ``python -m paragrafs`` to work
- All argument handling lives in cli.main()
"""

from paragrafs.cli import main

if __name__ == "__main__":
    main()
