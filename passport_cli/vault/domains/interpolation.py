"""Turn a script's command template into a process argument vector.

Two stages:
    1. interpolate() replaces ``<secrets.NAME>`` markers with plain text values.
    2. split_command() splits the result into arguments using shell-like
       quoting and escaping rules.
"""
import logging
import re
from typing import List

from .errors import EmptyCommandError, NotFoundError, UnterminatedQuoteError

logger = logging.getLogger(__name__)

SECRET_PATTERN = re.compile(r"<secrets\.([a-zA-Z0-9_-]+)>")

WHITESPACE = (" ", "\t")
QUOTES = ('"', "'")
ESCAPE = "\\"


def _next_marker(text: str, seen: set):
    for match in SECRET_PATTERN.finditer(text):
        if match.group(0) not in seen:
            return match
    return None


def interpolate(command: str, store, crypto) -> str:
    """
    Replace every ``<secrets.NAME>`` marker in command with the secret's value.

    All occurrences of a marker are replaced at once. The text is scanned
    again after each replacement, so markers contained in a secret's value
    are also expanded. A marker whose secret does not exist is left in place.
    Each distinct marker is handled at most once, which bounds the loop even
    when a value refers back to its own secret.

    Secure values are decrypted with crypto; a value that cannot be
    decrypted is substituted as an empty string.
    """
    text = command
    seen = set()

    match = _next_marker(text, seen)
    while match is not None:
        marker, name = match.group(0), match.group(1)
        seen.add(marker)

        try:
            secret = store.get_secret(name)
        except NotFoundError:
            logger.debug(f"No secret named '{name}', leaving {marker} unresolved")
        else:
            text = text.replace(marker, secret.resolve_value(crypto))

        match = _next_marker(text, seen)

    return text


def split_command(text: str) -> List[str]:
    """
    Split a command string into an argument vector.

    Rules:
        - Spaces and tabs separate arguments outside quotes.
        - '...' and "..." group text into one argument, quotes can be joined
          to adjacent text (a"b c"d -> 'ab cd') and "" yields an empty argument.
        - Outside quotes a backslash makes the next character literal.
        - Inside double quotes a backslash escapes only '"' and '\\'.
        - Inside single quotes every character is literal.

    Raises:
        UnterminatedQuoteError: If a quoted region is not closed
        EmptyCommandError: If the text contains no arguments
    """
    args = []
    current = []
    in_word = False
    quote = None

    i = 0
    while i < len(text):
        c = text[i]

        if quote is not None:
            if c == quote:
                quote = None
            elif c == ESCAPE and quote == '"' and text[i + 1:i + 2] in ('"', ESCAPE):
                i += 1
                current.append(text[i])
            else:
                current.append(c)
        elif c == ESCAPE:
            in_word = True
            if i + 1 < len(text):
                i += 1
            current.append(text[i])
        elif c in QUOTES:
            quote = c
            in_word = True
        elif c in WHITESPACE:
            if in_word:
                args.append("".join(current))
                current = []
                in_word = False
        else:
            current.append(c)
            in_word = True

        i += 1

    # The command text may hold interpolated secrets, keep it out of the message.
    if quote is not None:
        raise UnterminatedQuoteError(f"command: unterminated {quote} quote")

    if in_word:
        args.append("".join(current))

    if not args:
        raise EmptyCommandError("command: no executable to run")

    return args
