"""Sanitisation helpers for free-text trigger fields.

Titles, descriptions and the other narrative fields of a trigger are
typed by users and later rendered by the dashboard, so HTML tags are
removed before the values are stored.
"""
import re

TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(text: str) -> str:
    """Remove HTML tags and surrounding whitespace.

    Parameters
    ----------
    text: str
        A user-supplied value such as a trigger title.

    Returns
    -------
    str
        The cleaned value; empty when nothing but markup was given.
    """
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()
