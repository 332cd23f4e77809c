"""
Keyword extraction for matching journal entries against location descriptions.
"""
from typing import FrozenSet, List

from .lexicon import STOPWORDS
from .tokenizer import split_words

MIN_KEYWORD_LENGTH = 3


def extract_keywords(text: str) -> List[str]:
    """
    Extract the keywords of a text.

    A keyword is a lower-cased word token that is at least MIN_KEYWORD_LENGTH
    characters long and not a stopword. Duplicates are removed; the first
    occurrence order is kept so results are stable.

    Args:
        text: Free text (entry description or location description)

    Returns:
        List[str]: Unique keywords in order of first appearance
    """
    if not text:
        return []

    keywords = []
    seen = set()
    for word in split_words(text.lower()):
        if len(word) < MIN_KEYWORD_LENGTH or word in STOPWORDS or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
    return keywords


def keyword_set(text: str) -> FrozenSet[str]:
    return frozenset(extract_keywords(text))
