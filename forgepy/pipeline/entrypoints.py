"""Entrypoints that run a VM over one parse lifecycle."""

from __future__ import annotations

from forgepy.parser import parse_result
from forgepy.pipeline.result import ForgeParseResult
from forgepy.vm import ForgeVM, VMOptions


def load_vm(
    text: str,
    options: VMOptions | None = None,
    *,
    parse: ForgeParseResult | None = None,
) -> ForgeVM:
    """Parse `text` (or reuse `parse`) and load it into a fresh VM.

    The stored lexer or parser error is raised when the source does not parse.
    """
    resolved_options = options or VMOptions()
    resolved_parse = _resolve_parse(text, resolved_options, parse)

    error = resolved_parse.error
    if error is not None:
        raise error
    module = resolved_parse.module()
    if module is None:
        raise ValueError("Parse result holds neither a module nor an error")

    vm = ForgeVM(resolved_options)
    vm.load_module(module)
    return vm


def _resolve_parse(
    text: str,
    options: VMOptions,
    parse: ForgeParseResult | None,
) -> ForgeParseResult:
    if parse is None:
        return parse_result(text, mode=options.parse_mode)
    if parse.source_text != text:
        raise ValueError("Provided parse result must match the source text")
    return parse
