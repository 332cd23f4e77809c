"""
Sentence and word tokenization used by the sentiment scorer and the keyword extractor.
"""
from typing import List

from nltk.tokenize import RegexpTokenizer

# Any of '.', '!', '?' or a newline ends a sentence
SENTENCE_BOUNDARY = r'[.!?\n]'
WORD_PATTERN = r'[A-Za-z0-9_]+'

# Split artifacts dropped after a sentence split. Any other whitespace-only
# piece is kept and counts as a sentence.
_DISCARDED_PIECES = ('', ' ')

_sentence_tokenizer = RegexpTokenizer(SENTENCE_BOUNDARY, gaps=True, discard_empty=False)
_word_tokenizer = RegexpTokenizer(WORD_PATTERN)


def split_sentences(text: str) -> List[str]:
    """
    Split raw text into sentences on '.', '!', '?' and newlines.

    Args:
        text: Raw entry text

    Returns:
        List[str]: Sentences in order of appearance, untrimmed
    """
    if not text:
        return []
    return [piece for piece in _sentence_tokenizer.tokenize(text) if piece not in _DISCARDED_PIECES]


def split_words(sentence: str) -> List[str]:
    """
    Split a sentence into alphanumeric word tokens. Case is preserved;
    apostrophes and other punctuation separate tokens ("don't" -> "don", "t").
    """
    if not sentence:
        return []
    return _word_tokenizer.tokenize(sentence)
