import re

_WORD_RE = re.compile(r"[\W_]+")
_SPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    return _WORD_RE.sub(" ", text.lower()).strip()


def tokenize(text: str) -> list[str]:
    return [t for t in normalize(text).split() if t]


def collapse_spaces(text: str) -> str:
    return _SPACE_RE.sub(" ", text).strip()
