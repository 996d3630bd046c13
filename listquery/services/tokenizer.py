import re
from urllib.parse import unquote_plus

_ARG_RE = re.compile(r"(?P<name>\w+)=(?P<value>.+)", re.DOTALL)


def tokenize(raw: str | None) -> dict[str, str]:
    """Split a raw ``key=value&key=value`` query string into a dict.

    The whole string is URL-decoded before splitting, segments that are not
    ``word=value`` are skipped and a repeated key keeps its last value.
    """
    text = unquote_plus(str(raw or "")).lstrip("?")
    args: dict[str, str] = {}
    if not text:
        return args
    for segment in text.split("&"):
        match = _ARG_RE.fullmatch(segment)
        if match is None:
            continue
        args[match.group("name")] = match.group("value")
    return args
