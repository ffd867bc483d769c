"""Rich error rendering with source context and a caret pointer."""

from forgepy.text import SourceLocation, source_line


def format_forge_error(
    message: str,
    location: SourceLocation,
    *,
    source: str | None = None,
    file_path: str | None = None,
    hint: str | None = None,
) -> str:
    file_info = f"{file_path}:" if file_path else ""
    lines = [
        f"error: {message}",
        f"  --> {file_info}{location.line}:{location.column}",
    ]

    if source:
        before = source_line(source, location.line - 1)
        current = source_line(source, location.line)
        after = source_line(source, location.line + 1)

        if before is not None:
            lines.append(_gutter_line(location.line - 1, before))

        if current is not None:
            lines.append(_gutter_line(location.line, current, highlight=True))
            lines.append(_gutter_line(None, _pointer(location.column, location.end_column)))

        if after is not None:
            lines.append(_gutter_line(location.line + 1, after))

    if hint:
        lines.append("")
        lines.append(f"hint: {hint}")

    return "\n".join(lines)


def _gutter_line(line_number: int | None, content: str, *, highlight: bool = False) -> str:
    gutter = f"{line_number:>4} | " if line_number is not None else "     | "
    prefix = ">" if highlight else " "
    return f"{prefix}{gutter}{content}"


def _pointer(column: int, end_column: int | None) -> str:
    start = max(0, column - 1)
    length = max(1, end_column - column) if end_column else 1
    return " " * start + "^" * length
