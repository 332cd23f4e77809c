"""
Lexicon based sentiment scoring of journal entry text.

A text is split into sentences and each sentence is classified positive,
negative or neutral from its floored polarity score. Classification counts are
accumulated across sentences: the breakdown recorded after each sentence is
the running total of everything seen so far, and the overall result is the
breakdown after the last sentence.
"""
import logging
import math
from dataclasses import dataclass, field, asdict
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, Optional, Tuple

from .exceptions import EmptyTextError
from .lexicon import PolarityLexicon, get_default_lexicon
from .tokenizer import split_sentences, split_words

logger = logging.getLogger(__name__)


class SentimentLabel(str, Enum):
    """Enumeration for sentiment classifications"""
    POSITIVE = 'positive'
    NEGATIVE = 'negative'
    NEUTRAL = 'neutral'


def to_percentage(part, whole) -> float:
    """part / whole * 100, rounded half-up to two decimals."""
    if not whole:
        return 0.0
    value = Decimal(str(part)) * 100 / Decimal(str(whole))
    return float(value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def round_percentage(value) -> float:
    """Round an already computed percentage half-up to two decimals."""
    return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def majority_label(positive: int, negative: int) -> SentimentLabel:
    """Positive vs negative totals decide the label; ties are neutral."""
    if positive > negative:
        return SentimentLabel.POSITIVE
    if negative > positive:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


@dataclass(frozen=True)
class SentenceScore:
    """
    Score of one sentence plus the running breakdown after it was counted.
    The label and percentages cover every sentence up to and including this one.
    """
    sentence: str
    score: float
    label: SentimentLabel
    positive_percentage: float
    negative_percentage: float
    neutral_percentage: float


@dataclass(frozen=True)
class SentimentResult:
    """Overall classification of a text with its percentage breakdown."""
    label: SentimentLabel
    positive_percentage: float
    negative_percentage: float
    neutral_percentage: float
    sentences: Tuple[SentenceScore, ...] = field(default=(), compare=False)

    @property
    def is_positive(self) -> bool:
        return self.label == SentimentLabel.POSITIVE

    def to_dict(self, include_sentences: bool = False) -> Dict:
        data = {
            'sentiment': self.label.value,
            'positive_percentage': self.positive_percentage,
            'negative_percentage': self.negative_percentage,
            'neutral_percentage': self.neutral_percentage,
        }
        if include_sentences:
            data['sentences'] = [
                dict(asdict(sentence), label=sentence.label.value)
                for sentence in self.sentences
            ]
        return data

    @classmethod
    def from_stored(cls, label, positive, negative, neutral) -> Optional['SentimentResult']:
        """
        Rebuild a result from persisted fields.
        Returns None when any field is missing, i.e. the entry was never scored.
        """
        if label is None or positive is None or negative is None or neutral is None:
            return None
        return cls(
            label=SentimentLabel(label),
            positive_percentage=float(positive),
            negative_percentage=float(negative),
            neutral_percentage=float(neutral),
        )


@dataclass
class _RunningCounts:
    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    def add(self, label: SentimentLabel) -> None:
        if label == SentimentLabel.POSITIVE:
            self.positive += 1
        elif label == SentimentLabel.NEGATIVE:
            self.negative += 1
        else:
            self.neutral += 1

    def percentages(self) -> Tuple[float, float, float]:
        total = self.total
        return (
            to_percentage(self.positive, total),
            to_percentage(self.negative, total),
            to_percentage(self.neutral, total),
        )


class SentimentScorer:
    """
    Scores free text with a polarity lexicon.
    Stateless between calls; the lexicon is shared and read-only.
    """

    def __init__(self, lexicon: Optional[PolarityLexicon] = None):
        self._lexicon = lexicon

    @property
    def lexicon(self) -> PolarityLexicon:
        if self._lexicon is None:
            self._lexicon = get_default_lexicon()
        return self._lexicon

    def score_sentence(self, sentence: str) -> float:
        """
        Polarity of one sentence floored to one decimal place.
        Flooring means a small positive score such as 0.05 becomes 0.0 (neutral)
        while a small negative one such as -0.05 becomes -0.1.
        """
        tokens = split_words(sentence)
        return math.floor(self.lexicon.polarity(tokens) * 10) / 10

    @staticmethod
    def classify(score: float) -> SentimentLabel:
        if score == 0:
            return SentimentLabel.NEUTRAL
        if score > 0:
            return SentimentLabel.POSITIVE
        return SentimentLabel.NEGATIVE

    def score_text(self, text: str) -> SentimentResult:
        """
        Classify a text and compute its sentence breakdown.

        Args:
            text: Raw entry text

        Returns:
            SentimentResult: Overall label, percentages and per-sentence running scores

        Raises:
            EmptyTextError: If the text is blank or yields no sentences
        """
        if not text or not text.strip():
            raise EmptyTextError()

        sentences = split_sentences(text)
        if not sentences:
            raise EmptyTextError(f"No sentences found in text: {text!r}")

        counts = _RunningCounts()
        sentence_scores = []

        for sentence in sentences:
            score = self.score_sentence(sentence)
            label = self.classify(score)
            counts.add(label)

            positive_pct, negative_pct, neutral_pct = counts.percentages()
            sentence_scores.append(SentenceScore(
                sentence=sentence,
                score=score,
                label=majority_label(counts.positive, counts.negative),
                positive_percentage=positive_pct,
                negative_percentage=negative_pct,
                neutral_percentage=neutral_pct,
            ))
            logger.debug(
                f"Sentence {sentence!r}: score={score} "
                f"running pos/neg/neu={counts.positive}/{counts.negative}/{counts.neutral}"
            )

        positive_pct, negative_pct, neutral_pct = counts.percentages()
        result = SentimentResult(
            label=majority_label(counts.positive, counts.negative),
            positive_percentage=positive_pct,
            negative_percentage=negative_pct,
            neutral_percentage=neutral_pct,
            sentences=tuple(sentence_scores),
        )
        logger.debug(
            f"Overall sentiment {result.label.value}: "
            f"{positive_pct}% positive, {negative_pct}% negative, {neutral_pct}% neutral "
            f"over {counts.total} sentences"
        )
        return result


_default_scorer = SentimentScorer()


def score_text(text: str) -> SentimentResult:
    """Score text with the process-wide AFINN scorer."""
    return _default_scorer.score_text(text)
