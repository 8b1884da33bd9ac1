"""Generate a markdown manual of the blocks from their module documentation."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Sequence
from itertools import takewhile
from pathlib import Path

USAGE = (
    "barblocks manpage generator\n"
    "\n"
    "USAGE:\n"
    "  gen-manpage <source dir> <output file>\n"
    "EXAMPLE:\n"
    "  gen-manpage ../src ../man/blocks.md\n"
)

DOC_PREFIX = "//!"


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def extract_doc(lines: Iterable[str]) -> str:
    """Collect the leading ``//!`` documentation lines as markdown.

    Headings are demoted by two levels so they nest under the block's heading.
    """
    parts = []
    stripped = (_strip_newline(line) for line in lines)
    for line in takewhile(lambda l: l.startswith(DOC_PREFIX), stripped):
        text = line[len(DOC_PREFIX):]
        if text.startswith(" "):
            text = text[1:]
        if text.startswith("#"):
            parts.append("##")
        parts.append(text)
        parts.append("\n")
    return "".join(parts)


def collect_docs(src_dir: str | os.PathLike[str]) -> list[tuple[str, str]]:
    """Documentation of each file in ``<src_dir>/blocks``, sorted by block name."""
    blocks_dir = Path(src_dir) / "blocks"
    result = []
    with os.scandir(blocks_dir) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            name, dot, _ = entry.name.rpartition(".")
            if not dot:
                raise ValueError(f"file name without extension: {entry.name!r}")
            with open(entry.path, encoding="utf-8", newline="\n") as f:
                doc = extract_doc(f)
            if doc:
                result.append((name, doc))
    result.sort(key=lambda item: item[0])
    return result


def render_markdown(docs: Sequence[tuple[str, str]]) -> str:
    """Join block documentation under a second-level heading per block."""
    return "".join(f"## {block}\n{doc}\n" for block, doc in docs)


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry: ``gen-manpage <source dir> <output file>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print(USAGE, file=sys.stderr)
        return 1
    src_dir, out_path = Path(args[0]), Path(args[1])
    markdown = render_markdown(collect_docs(src_dir))
    Path(out_path).write_text(markdown, encoding="utf-8")
    return 0


if __name__ == "__main__":
    sys.exit(main())