"""
=============================================================================
REQUEST-LINE GRAMMAR
=============================================================================

One regular expression describes every request-line we accept:

    \\s*(GET|POST|PUT|DELETE|OPTIONS|HEAD|TRACE|CONNECT) (\\S+) HTTP/(\\d+)\\.(\\d+)

    ─┬─ ──────────────────────┬───────────────────────  ─┬─       ─┬─    ─┬─
     │                        │                          │         │      │
     │                     METHOD                     URI-TOKEN  MAJOR  MINOR
     │
     └── optional leading whitespace

    - exactly ONE space between the three parts ("GET  /" is rejected)
    - the WHOLE line must match, so "GET / HTTP/1.1 extra" is rejected
    - re.ASCII keeps \\s, \\S and \\d to their ASCII meaning; without it
      "\\d" would also accept Arabic-Indic and other Unicode digits

The grammar only answers "does it match, and what are the pieces". It does
not know what a Method or a Version is; turning the captured strings into
values is the parser's job (request_line.py).

=============================================================================
"""

import re
from typing import Optional, Tuple


REQUEST_LINE_PATTERN = re.compile(
    r"\s*(GET|POST|PUT|DELETE|OPTIONS|HEAD|TRACE|CONNECT) "  # Method
    r"(\S+) "                                                # URI
    r"HTTP/(\d+)\.(\d+)",                                    # Version Major.Minor
    re.ASCII,
)


def match_request_line(line: str) -> Optional[Tuple[str, str, str, str]]:
    """
    Match a single line (without its line ending) against the grammar.

    Args:
        line: The candidate request-line.

    Returns:
        (method, uri, major, minor) strings on a match, None otherwise.

    Example:
        >>> match_request_line("GET /index.html HTTP/1.1")
        ('GET', '/index.html', '1', '1')
        >>> match_request_line("GET  /index.html HTTP/1.1") is None
        True
    """
    match = REQUEST_LINE_PATTERN.fullmatch(line)
    if match is None:
        return None
    return match.group(1), match.group(2), match.group(3), match.group(4)
