"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

This server reads exactly ONE line from each connection and ignores
everything after it (headers, body). The line has the shape:

    METHOD SP PATH [SP anything-else...] LF

    Example: "GET /calc?a=3&b=4 HTTP/1.1\r\n"
              ─┬─ ───────┬───────  ───┬───
             method     path      ignored

=============================================================================
A TAGGED RESULT, NOT AN INDEX FAULT
=============================================================================

The naive way to read the tokens is:

    tokens = line.split(" ")
    method, path = tokens[0], tokens[1]      ← IndexError on "GET\r\n"

Instead, parse() checks the token count first and returns one of two
values, so the caller handles bad input with an ordinary branch:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   parse(raw_line)                                                   │
    │       │                                                             │
    │       ├── ParsedRequest(method, path, ...)      → route it          │
    │       │                                                             │
    │       └── MalformedRequest(reason, blank, ...)                      │
    │               ├── blank=True   → close silently, no response        │
    │               └── blank=False  → 400 Bad Request                    │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ParsedRequest:
    """
    A well-formed request line.

    Attributes:
        method: First token (GET, POST, ...). Not validated; routing
                ignores it.
        path: Second token, query string included ("/calc?a=1&b=2").
        line: The decoded line without its terminator (for logging).
        raw_size: Bytes consumed from the connection, terminator included.
    """
    method: str
    path: str
    line: str = ""
    raw_size: int = 0


@dataclass(frozen=True)
class MalformedRequest:
    """
    A request line that cannot be routed.

    Attributes:
        reason: Human-readable cause (for logging).
        line: The decoded line without its terminator.
        raw_size: Bytes consumed from the connection.
        blank: True when the line was empty. A blank line is treated like
               a connection that never sent a request.
    """
    reason: str
    line: str = ""
    raw_size: int = 0
    blank: bool = False


ParseResult = Union[ParsedRequest, MalformedRequest]


class RequestParser:
    """
    Turns a raw request line into a ParsedRequest or MalformedRequest.

    Usage:
        parser = RequestParser()
        result = parser.parse(b"GET /stats HTTP/1.1\\r\\n")
        if isinstance(result, ParsedRequest):
            result.path            # "/stats"
    """

    def __init__(self, max_line_length: int = 8192):
        """
        Args:
            max_line_length: Longest accepted line in bytes, terminator
                             excluded. Longer lines are malformed.
        """
        self.max_line_length = max_line_length

    def parse(self, raw: bytes) -> ParseResult:
        """
        Parse one request line.

        Args:
            raw: Bytes read from the connection, normally ending in LF
                 (a final line without a terminator is accepted too).

        Returns:
            ParsedRequest, or MalformedRequest if the line is blank, too
            long, or has fewer than two tokens.
        """
        raw_size = len(raw)
        content = raw.rstrip(b"\r\n")
        line = content.decode("utf-8", errors="replace")

        if len(content) > self.max_line_length:
            return MalformedRequest(
                reason=f"Request line too long: {len(content)} bytes",
                line=line[:80],
                raw_size=raw_size,
            )

        if not line.strip():
            return MalformedRequest(
                reason="Empty request line",
                line=line,
                raw_size=raw_size,
                blank=True,
            )

        tokens = split_tokens(line)
        if len(tokens) < 2:
            return MalformedRequest(
                reason=f"Expected 'METHOD PATH', got {len(tokens)} token(s)",
                line=line,
                raw_size=raw_size,
            )

        return ParsedRequest(
            method=tokens[0],
            path=tokens[1],
            line=line,
            raw_size=raw_size,
        )


def split_tokens(line: str) -> list[str]:
    """
    Split on single spaces, dropping trailing empty tokens.

    Consecutive spaces produce empty tokens in the middle, which keeps
    token positions stable:

        >>> split_tokens("GET  /x")
        ['GET', '', '/x']
        >>> split_tokens("GET ")
        ['GET']
    """
    tokens = line.split(" ")
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def parse_request(raw: bytes, max_line_length: int = 8192) -> ParseResult:
    """
    Convenience function to parse a request line in one call.

    Use RequestParser directly when parsing many lines with the same
    settings.
    """
    return RequestParser(max_line_length=max_line_length).parse(raw)
