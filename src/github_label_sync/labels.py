"""Label value types shared by the sync engine, providers and the label file loader.

Label names are matched case-insensitively everywhere (GitHub treats "Bug" and
"bug" as the same label), so every lookup goes through `label_key`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_COLOR_RE = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True, slots=True)
class LabelSpec:
    """Locally declared desired state of one label.

    `category` and `memo` are local-only and never sent to a provider.
    """

    name: str
    color: str
    description: str
    category: str | None = None
    memo: str | None = None

    @property
    def key(self) -> str:
        return label_key(self.name)


def label_key(name: str) -> str:
    """Return the normalized lookup key for a label name."""

    return name.lower()


def normalize_color(value: str) -> str:
    """Normalize a hex color to 6 lowercase digits without a leading '#'.

    Raises:
        ValueError: if the value is not a 3 or 6 digit hex color.
    """

    color = value.strip().removeprefix("#")
    if not _HEX_COLOR_RE.match(color):
        raise ValueError(f"Invalid hex color: {value!r}")
    if len(color) == 3:
        color = "".join(c * 2 for c in color)
    return color.lower()


def colors_equal(a: str, b: str) -> bool:
    return a.strip().removeprefix("#").lower() == b.strip().removeprefix("#").lower()
