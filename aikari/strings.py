"""String helpers."""

from __future__ import annotations

import os
import re
from typing import List

_ENV_REF = re.compile(r"%([^%]+)%")


def split(text: str, delim: str) -> List[str]:
    """Split ``text`` on a one-character delimiter.

    Empty fields are kept, except a single trailing empty field, so
    ``"a/b/"`` gives ``["a", "b"]`` and ``""`` gives ``[]``.
    """
    if len(delim) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delim!r}")
    parts = text.split(delim)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def expand_env(text: str) -> str:
    """Replace ``%NAME%`` references with environment values.

    References to variables that are not set are left unchanged.
    """

    def substitute(match: "re.Match[str]") -> str:
        value = os.environ.get(match.group(1))
        return match.group(0) if value is None else value

    return _ENV_REF.sub(substitute, text)