import re

_HTML_TAG = re.compile(r'<[^>]*>')


def sanitize_string(v):
    """Strip HTML tags and surrounding whitespace. Non-strings (including None) pass through."""
    if not isinstance(v, str):
        return v
    return _HTML_TAG.sub('', v).strip()


HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')


def validate_color(v):
    """Accept ``#RGB`` / ``#RRGGBB``; None passes through so defaults can apply."""
    if v is None:
        return v
    v = v.strip()
    if not HEX_COLOR.match(v):
        raise ValueError("Color must be a hex value like #FFF or #FFD700")
    return v
