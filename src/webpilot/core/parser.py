"""
Parsing of command-file text into :class:`Command` values.

Grammar (one command per file):
  <tag>                       exact tags, no arguments
  <tag>:<argument>            goto, click, wait, scroll
  type:<selector>:<text>      text may itself contain ':'

Tags are case-insensitive; arguments keep their case.
"""
from typing import Optional

from .models import Command, CommandTag, EXACT_TAGS, PREFIXED_TAGS

_EXACT = {tag.value: tag for tag in EXACT_TAGS}
_PREFIXED = {tag.value: tag for tag in PREFIXED_TAGS}


def parse_command(text: Optional[str]) -> Optional[Command]:
    """Parse a raw command line.

    Returns None for empty or whitespace-only text. Unrecognised text gives
    an UNKNOWN command instead of raising.
    """
    if text is None:
        return None
    raw = text.strip()
    if not raw:
        return None

    lowered = raw.lower()
    if lowered in _EXACT:
        return Command(tag=_EXACT[lowered], raw=raw)

    head, sep, rest = raw.partition(":")
    tag = _PREFIXED.get(head.strip().lower()) if sep else None
    if tag is None:
        return Command(tag=CommandTag.UNKNOWN, args=(raw,), raw=raw)

    if tag == CommandTag.TYPE:
        selector, _, value = rest.partition(":")
        return Command(tag=tag, args=(selector.strip(), value.strip()), raw=raw)
    if tag == CommandTag.SCROLL:
        return Command(tag=tag, args=(rest.strip().lower(),), raw=raw)
    return Command(tag=tag, args=(rest.strip(),), raw=raw)
