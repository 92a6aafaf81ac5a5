"""CLI wrapper for the verse layout library.

WHY: Formatting a chapter file without the rest of the reader is handy for
checking layouts and for piping chapter text into other tools. It also
supports `python -m verse_layout`.

HOW: Parses sys.argv for input path, output path and the --preset, --book
and --chapter flags, reads the chapter JSON (a list of verse strings or
{verse, text} objects) and prints the lines from format_chapter().

RULES:
- Usage:
    python -m verse_layout chapter.json output.txt [--preset study]
    python -m verse_layout chapter.json --book John --chapter 3
    cat chapter.json | python -m verse_layout - output.txt
- Exit codes: 0 = success, 1 = error.
- Progress messages go to stderr; lines go to stdout (if no output file).
"""

import sys
from dataclasses import asdict
from typing import List

from . import format_chapter
from .core import load_verses
from .models import ChapterContext
from .presets import PRESETS, merge_format_options, resolve_preset

HELP_TEXT = """verse_layout — Bible chapter text formatter

Usage:
    python -m verse_layout chapter.json output.txt
    python -m verse_layout chapter.json output.txt --preset study
    python -m verse_layout chapter.json --book John --chapter 3
    cat chapter.json | python -m verse_layout - output.txt

Input: a JSON list of verse strings, or of {"verse": N, "text": "..."} objects.
"""

_VALUE_FLAGS = ("--preset", "--book", "--chapter")


def main(argv: "List[str]" = None) -> None:
    """Run the verse layout CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
    """
    if argv is None:
        argv = sys.argv[1:]

    args = list(argv)

    if not args or args[0] in ("-h", "--help"):
        print(HELP_TEXT)
        print("Available presets:")
        for name, preset in PRESETS.items():
            print("  {:<11} width {}, indent {}, spacing {}, {}".format(
                name,
                preset["max_line_length"],
                preset["indent_size"],
                preset["verse_spacing"],
                "verse breaks" if preset["break_verses"] else "continuous",
            ))
        sys.exit(0)

    # Extract --flag value / --flag=value arguments
    options = {"--preset": "default", "--book": "", "--chapter": "1"}
    filtered_args = []  # type: List[str]
    i = 0
    while i < len(args):
        flag = args[i].split("=", 1)[0]
        if flag in _VALUE_FLAGS and "=" in args[i]:
            options[flag] = args[i].split("=", 1)[1]
            i += 1
        elif flag in _VALUE_FLAGS and i + 1 < len(args):
            options[flag] = args[i + 1]
            i += 2
        else:
            filtered_args.append(args[i])
            i += 1

    try:
        config = merge_format_options(base=resolve_preset(options["--preset"]))
        chapter_number = int(options["--chapter"])
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    # The header needs a book title
    if not options["--book"]:
        config = merge_format_options({"chapter_header": False}, base=asdict(config))

    input_path = filtered_args[0] if filtered_args else "-"
    output_path = filtered_args[1] if len(filtered_args) > 1 else None

    if input_path == "-":
        raw = sys.stdin.read()
    else:
        with open(input_path, "r", encoding="utf-8") as f:
            raw = f.read()

    try:
        verses = load_verses(raw)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    if not verses:
        print("Error: No verses found in input", file=sys.stderr)
        sys.exit(1)

    ctx = ChapterContext(book_title=options["--book"], chapter_number=chapter_number)
    lines = format_chapter(verses, ctx, config)
    text = "\n".join(lines) + "\n"

    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        print(
            "Wrote {} verses as {} lines ({} preset) to {}".format(
                len(verses), len(lines), options["--preset"], output_path
            ),
            file=sys.stderr,
        )
    else:
        sys.stdout.write(text)


if __name__ == "__main__":
    main()
