"""Shell-like command splitting.

Only a small quoting grammar is understood: whitespace separates fields,
double quotes group whitespace into one field, and inside quotes ``\\"``
stands for a literal double quote. Everything else, including backslashes
outside that one escape, passes through untouched. No variable expansion,
globbing or single-quote handling takes place.
"""

from __future__ import annotations

from procwarden.exceptions import InvalidCommandError

_QUOTE = '"'
_ESCAPE = "\\"


def tokenize(command: str) -> list[str]:
    """Split ``command`` into the argument vector a program would receive.

    Raises InvalidCommandError for an unterminated quote or a command with
    no fields at all.
    """
    argv: list[str] = []
    field: list[str] = []
    in_field = False
    in_quotes = False
    i = 0
    n = len(command)

    while i < n:
        ch = command[i]
        if in_quotes:
            if ch == _ESCAPE and i + 1 < n and command[i + 1] == _QUOTE:
                field.append(_QUOTE)
                i += 2
                continue
            if ch == _QUOTE:
                in_quotes = False
            else:
                field.append(ch)
        elif ch == _QUOTE:
            in_quotes = True
            in_field = True  # "" is an empty field, not nothing
        elif ch.isspace():
            if in_field:
                argv.append("".join(field))
                field = []
                in_field = False
        else:
            field.append(ch)
            in_field = True
        i += 1

    if in_quotes:
        raise InvalidCommandError(f"Unterminated quote in command: {command!r}")
    if in_field:
        argv.append("".join(field))
    if not argv:
        raise InvalidCommandError("Command is empty")
    return argv
