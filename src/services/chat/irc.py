"""
MassBan - IRC Message Parsing
=============================

Parses the IRCv3 lines Twitch chat sends over its WebSocket.

Line format:
    [@tags ][:prefix ]COMMAND[ params...][ :trailing]
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

# IRCv3 tag value escapes
_TAG_ESCAPES = {
    ":": ";",
    "s": " ",
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}


@dataclass(frozen=True)
class IrcMessage:
    """One parsed IRC line."""

    command: str
    params: List[str] = field(default_factory=list)
    trailing: Optional[str] = None
    prefix: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def nick(self) -> Optional[str]:
        """Nickname part of the prefix, e.g. 'bot' for 'bot!bot@bot.tmi.twitch.tv'."""
        if not self.prefix:
            return None
        return self.prefix.split("!", 1)[0]

    @property
    def msg_id(self) -> Optional[str]:
        return self.tags.get("msg-id")


def _unescape_tag(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            out.append(_TAG_ESCAPES.get(value[i + 1], value[i + 1]))
            i += 2
            continue
        if ch != "\\":
            out.append(ch)
        i += 1
    return "".join(out)


def _parse_tags(raw: str) -> Dict[str, str]:
    tags = {}
    for item in raw.split(";"):
        if not item:
            continue
        key, _, value = item.partition("=")
        tags[key] = _unescape_tag(value)
    return tags


def parse_line(line: str) -> Optional[IrcMessage]:
    """
    Parse one IRC line.

    Args:
        line: Raw line without the trailing CRLF.

    Returns:
        IrcMessage, or None for blank or malformed input.
    """
    rest = line.strip("\r\n")
    if not rest.strip():
        return None

    tags: Dict[str, str] = {}
    prefix = None

    if rest.startswith("@"):
        raw_tags, _, rest = rest[1:].partition(" ")
        tags = _parse_tags(raw_tags)
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        prefix, _, rest = rest[1:].partition(" ")
        rest = rest.lstrip(" ")

    trailing = None
    if " :" in rest:
        rest, _, trailing = rest.partition(" :")
    elif rest.startswith(":"):
        trailing = rest[1:]
        rest = ""

    parts = rest.split()
    if not parts:
        return None

    return IrcMessage(
        command=parts[0].upper(),
        params=parts[1:],
        trailing=trailing,
        prefix=prefix,
        tags=tags,
    )


def split_frame(frame: str) -> List[str]:
    """Split a WebSocket text frame into its non-empty IRC lines."""
    return [line for line in frame.split("\r\n") if line]


__all__ = ["IrcMessage", "parse_line", "split_frame"]
