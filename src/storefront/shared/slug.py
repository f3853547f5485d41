"""URL slug derivation shared by products and categories."""

import re

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse every run of non ``[a-z0-9]`` characters into one hyphen.

    >>> slugify("Men's Running Shoes!!")
    'men-s-running-shoes'
    """
    return _NON_ALPHANUMERIC.sub("-", name.lower()).strip("-")
