"""Package entry point for ``python -m readalong_sync``.

WHY: Users run the tools as ``python -m readalong_sync segment page.txt``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from readalong_sync.cli import main

if __name__ == "__main__":
    main()
