"""
Small text helpers shared by the API and page descriptors.
"""
import re

_WORD = re.compile(r"\w\S*")


def to_title_case(value: str) -> str:
    """Capitalise the first letter of every word and lowercase the rest."""
    if not value:
        return ""
    return _WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), value)
