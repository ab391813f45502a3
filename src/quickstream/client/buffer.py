"""Client-side accumulation of received fragments."""

import math
import re

from quickstream.streaming.framing import decode_payload

_LEADING_QUOTE = re.compile(r'\A"')
_TRAILING_QUOTE = re.compile(r'"\Z')

# ECMAScript WhiteSpace and LineTerminator code points. Differs from the
# str.strip() default: keeps \x1c-\x1f and \x85, drops \ufeff.
_TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def clean_text(text: str) -> str:
    """Derive display text from the raw concatenation of frame payloads.

    Each payload is a JSON string, so the joined buffer looks like
    ``"Hel""lo"``. Strip one leading quote, drop every doubled quote,
    strip one trailing quote, then trim whitespace the way a browser
    trims a string. Escapes inside the payloads are left as they are.
    """
    text = _LEADING_QUOTE.sub("", text, count=1)
    text = text.replace('""', "")
    text = _TRAILING_QUOTE.sub("", text, count=1)
    return text.strip(_TRIM_CHARS)


def format_elapsed(elapsed_ms: float) -> str:
    return f'Time taken before first response is displayed: "{math.floor(elapsed_ms)}ms"'


class TextBuffer:
    """Append-only record of one session's frame payloads.

    ``raw`` is the payloads joined as received, ``text`` the JSON-decoded
    fragments joined, and ``display`` the cleaned raw join that gets
    rendered.
    """

    def __init__(self) -> None:
        self._payloads: list[str] = []
        self._fragments: list[str] = []

    def __len__(self) -> int:
        return len(self._payloads)

    @property
    def is_empty(self) -> bool:
        return not self._payloads

    def reset(self) -> None:
        self._payloads = []
        self._fragments = []

    def append(self, payload: str) -> str:
        """Decode and store one payload. Returns the decoded fragment.

        A payload decoding to an empty string carries nothing and is not stored.
        """
        fragment = decode_payload(payload)
        if fragment:
            self._payloads.append(payload)
            self._fragments.append(fragment)
        return fragment

    @property
    def raw(self) -> str:
        return "".join(self._payloads)

    @property
    def text(self) -> str:
        return "".join(self._fragments)

    @property
    def display(self) -> str:
        return clean_text(self.raw)
