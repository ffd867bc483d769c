"""Shared parse carrier and lazy pipeline entrypoint exports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from forgepy.pipeline.result import ForgeParseResult

if TYPE_CHECKING:
    from forgepy.vm import ForgeVM, VMOptions


def load_vm(
    text: str,
    options: VMOptions | None = None,
    *,
    parse: ForgeParseResult | None = None,
) -> ForgeVM:
    from forgepy.pipeline.entrypoints import load_vm as _load_vm

    return _load_vm(text, options, parse=parse)


__all__ = [
    "ForgeParseResult",
    "load_vm",
]
