"""Indentation stripping for inline YAML blocks."""

from kappsync.exceptions import FormatError


def strip_indent(text: str) -> str:
    """
    Remove the common indentation of an inline configuration block.

    The indent of the first non-blank line is the reference prefix and
    every other non-blank line must start with it. Leading and trailing
    blank lines are dropped.

    Args:
        text: Configuration text, typically written as an indented heredoc

    Returns:
        De-indented text

    Raises:
        FormatError: If a non-blank line does not start with the reference indent
    """
    lines = text.split("\n")
    trailing_newline = text.endswith("\n")

    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()

    if not lines:
        return ""

    first = lines[0]
    indent = first[: len(first) - len(first.lstrip())]

    stripped = []
    for num, line in enumerate(lines, start=1):
        if not line.strip():
            stripped.append("")
            continue
        if not line.startswith(indent):
            raise FormatError(
                f"Expected line {num} to start with indent {indent!r}: {line!r}"
            )
        stripped.append(line[len(indent):])

    result = "\n".join(stripped)
    if trailing_newline:
        result += "\n"
    return result
