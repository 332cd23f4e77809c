"""
Process-wide word tables for the analysis core: the stem-keyed AFINN polarity
lexicon, negation words and the keyword stopword list.
"""
import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from afinn import Afinn
from afinn.afinn import LANGUAGE_TO_FILENAME
from nltk.stem import PorterStemmer

logger = logging.getLogger(__name__)


NEGATIONS = frozenset(['not', 'no', 'never', 'neither'])

STOPWORDS = frozenset([
    'about', 'above', 'after', 'again', 'all', 'also', 'am', 'an', 'and', 'another',
    'any', 'are', 'as', 'at', 'be', 'because', 'been', 'before', 'being', 'below',
    'between', 'both', 'but', 'by', 'came', 'can', 'cannot', 'come', 'could', 'did',
    'do', 'does', 'doing', 'during', 'each', 'few', 'for', 'from', 'further', 'get',
    'got', 'has', 'had', 'he', 'have', 'her', 'here', 'him', 'himself', 'his', 'how',
    'if', 'in', 'into', 'is', 'it', 'its', 'itself', 'like', 'make', 'many', 'me',
    'might', 'more', 'most', 'much', 'must', 'my', 'myself', 'never', 'now', 'of',
    'on', 'only', 'or', 'other', 'our', 'ours', 'ourselves', 'out', 'over', 'own',
    'said', 'same', 'see', 'should', 'since', 'so', 'some', 'still', 'such', 'take',
    'than', 'that', 'the', 'their', 'theirs', 'them', 'themselves', 'then', 'there',
    'these', 'they', 'this', 'those', 'through', 'to', 'too', 'under', 'until', 'up',
    'very', 'was', 'way', 'we', 'well', 'were', 'what', 'where', 'when', 'which',
    'while', 'who', 'whom', 'with', 'would', 'why', 'you', 'your', 'yours',
    'yourself', 'a', 'b', 'c', 'd', 'e', 'f', 'g', 'h', 'i', 'j', 'k', 'l', 'm',
    'n', 'o', 'p', 'q', 'r', 's', 't', 'u', 'v', 'w', 'x', 'y', 'z', '$', '1', '2',
    '3', '4', '5', '6', '7', '8', '9', '0', '_',
])


def load_afinn_vocabulary(language: str = 'en') -> Mapping[str, float]:
    """
    Read the AFINN word list shipped with the afinn package.

    Returns:
        Mapping[str, float]: word -> valence (-5 .. +5), in file order
    """
    afinn = Afinn(language=language)
    return afinn.read_word_file(afinn.full_filename(LANGUAGE_TO_FILENAME[language]))


class PolarityLexicon:
    """
    Stem-aware polarity lexicon.

    Every vocabulary word is keyed by its Porter stem, so inflected forms
    ("loved", "beautifully") resolve to the same valence as their base word.
    When two words share a stem the later one in the vocabulary wins.
    """

    def __init__(self, vocabulary: Optional[Mapping[str, float]] = None,
                 stemmer=None, negations: Iterable[str] = NEGATIONS):
        self.stemmer = stemmer or PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)
        if vocabulary is None:
            vocabulary = load_afinn_vocabulary()

        table = {}
        for word, value in vocabulary.items():
            table[self.stemmer.stem(word)] = float(value)
        self._table = MappingProxyType(table)
        self.negations = frozenset(negations)

    def __len__(self):
        return len(self._table)

    def __contains__(self, word):
        return self.valence(word) is not None

    def valence(self, token: str) -> Optional[float]:
        """
        Look up a token: first the lower-cased token itself, then its stem.

        Returns:
            Optional[float]: Valence, or None when the word is unknown
        """
        lowered = token.lower()
        if lowered in self._table:
            return self._table[lowered]
        return self._table.get(self.stemmer.stem(lowered))

    def polarity(self, tokens) -> float:
        """
        Average valence of a token sequence.

        A negation word flips the sign of every token that follows it in the
        sequence. Unknown tokens add nothing but still count towards the
        length. An empty sequence scores 0.
        """
        tokens = list(tokens)
        if not tokens:
            return 0.0

        score = 0.0
        negator = 1
        for token in tokens:
            if token.lower() in self.negations:
                negator = -1
                continue
            value = self.valence(token)
            if value is not None:
                score += negator * value

        return score / len(tokens)


@lru_cache(maxsize=None)
def get_default_lexicon() -> PolarityLexicon:
    """Build the AFINN lexicon once per process."""
    lexicon = PolarityLexicon()
    logger.info(f"Loaded polarity lexicon with {len(lexicon)} stems")
    return lexicon
