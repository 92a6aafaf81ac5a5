"""Package entry point for ``python -m bible_reader``.

WHY: Users run the reader as ``python -m bible_reader read John 3`` for CLI
mode, or ``python -m bible_reader --serve`` for the HTTP API.

HOW: Checks sys.argv for the ``--serve`` flag. If present, starts the
FastAPI app under uvicorn. Otherwise, delegates to the CLI's main() function.

RULES:
- ``--serve`` starts the HTTP API (host/port from BIBLE_READER_HOST/PORT)
- Without ``--serve``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from bible_reader.server.app import serve
        serve()
    else:
        from bible_reader.cli import main
        main()
