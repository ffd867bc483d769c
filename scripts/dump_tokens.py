#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path

from forgepy.diagnostics import LexerError
from forgepy.lexer import Token, dump_tokens, tokenize


def write_tokens(tokens: list[Token], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        for idx, token in enumerate(tokens):
            f.write(f"[{idx}] {token.kind.name} {token.line}:{token.column} value={token.value!r}\n")


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the token stream of a .forge file")
    parser.add_argument("path", type=Path, help="Forge source file")
    parser.add_argument("--output", type=Path, default=None, help="Write tokens to this file instead of stdout")
    args = parser.parse_args()

    input_path: Path = args.path
    text = input_path.read_text(encoding="utf-8")

    try:
        tokens = tokenize(text)
    except LexerError as error:
        print(error.with_source(text, str(input_path)).format())
        return 1

    if args.output is None:
        dump_tokens(tokens)
    else:
        write_tokens(tokens, args.output)
        print(f"Wrote {len(tokens)} tokens to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
