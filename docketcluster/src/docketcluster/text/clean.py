from __future__ import annotations

import html
import re
from typing import List

WHITESPACE_RE = re.compile(r'\s+')
HTML_TAG_RE = re.compile(r'<[^>]+>')
TOKEN_RE = re.compile(r"[\w']+")


def strip_html(value: str) -> str:
    return HTML_TAG_RE.sub(' ', value)


def normalize_whitespace(value: str) -> str:
    return WHITESPACE_RE.sub(' ', value).strip()


def basic_clean(text: str) -> str:
    text = html.unescape(text or '')
    text = strip_html(text)
    text = normalize_whitespace(text)
    return text


def tokenize(text: str) -> List[str]:
    """Lowercased word tokens; punctuation other than apostrophes splits tokens."""
    if not text:
        return []
    tokens = (token.strip("'") for token in TOKEN_RE.findall(basic_clean(text).lower()))
    return [token for token in tokens if token]


__all__ = ['basic_clean', 'normalize_whitespace', 'strip_html', 'tokenize']
