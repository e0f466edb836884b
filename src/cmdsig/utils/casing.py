"""Key normalisation for bound arguments and flags.

Handlers address inputs by a single camel-joined identifier no matter
how the name was written on the command line or in the signature:
``file-path``, ``file_path`` and ``filePath`` all become ``filePath``.
"""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")


def camel_key(name: str) -> str:
    """Join the words of *name* into camel form.

    Words are split on any run of non-alphanumeric characters.  The
    first word keeps its case except for a lowered first letter; every
    following word gets an upper-cased first letter.  An existing camel
    name is returned unchanged.
    """
    words = [word for word in _SEPARATORS.split(name) if word]
    if not words:
        return ""
    head, *tail = words
    return head[0].lower() + head[1:] + "".join(w[0].upper() + w[1:] for w in tail)
