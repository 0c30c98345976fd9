"""Package entry point for ``python -m clip_renderer``.

WHY: Users run ``python -m clip_renderer captions dialogue.json`` or
``python -m clip_renderer serve`` without installing console scripts.

HOW: Delegates to the CLI's main() and exits with its status code.
"""

import sys

from clip_renderer.cli import main

if __name__ == "__main__":
    sys.exit(main())
