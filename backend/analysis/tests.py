"""
Tests for the text analysis core.
"""
from django.test import SimpleTestCase

from analysis.exceptions import EmptyTextError
from analysis.keywords import extract_keywords, keyword_set
from analysis.lexicon import PolarityLexicon, STOPWORDS, get_default_lexicon, load_afinn_vocabulary
from analysis.sentiment import (
    SentimentLabel,
    SentimentResult,
    SentimentScorer,
    to_percentage,
    score_text,
)
from analysis.tokenizer import split_sentences, split_words


def make_scorer(vocabulary):
    """Scorer over a small fixed vocabulary so scores are exact"""
    return SentimentScorer(lexicon=PolarityLexicon(vocabulary=vocabulary))


class TokenizerTestCase(SimpleTestCase):
    """Test cases for sentence and word splitting"""

    def test_split_sentences_on_all_boundaries(self):
        sentences = split_sentences("One. Two! Three?\nFour")
        self.assertEqual(sentences, ['One', ' Two', ' Three', 'Four'])

    def test_trailing_boundary_leaves_no_sentence(self):
        self.assertEqual(split_sentences("I love this beach. It was okay."), ['I love this beach', ' It was okay'])

    def test_whitespace_only_piece_is_kept(self):
        # A single space between boundaries is dropped, wider gaps are kept
        self.assertEqual(split_sentences("Wow. . nice"), ['Wow', ' nice'])
        self.assertEqual(split_sentences("Wow.  . nice"), ['Wow', '  ', ' nice'])

    def test_split_sentences_empty(self):
        self.assertEqual(split_sentences(""), [])
        self.assertEqual(split_sentences("..."), [])

    def test_split_words_preserves_case(self):
        self.assertEqual(split_words("Hello, World 42"), ['Hello', 'World', '42'])

    def test_split_words_breaks_contractions(self):
        self.assertEqual(split_words("don't stop"), ['don', 't', 'stop'])

    def test_split_words_empty(self):
        self.assertEqual(split_words("  "), [])


class PolarityLexiconTestCase(SimpleTestCase):
    """Test cases for the stem-aware lexicon"""

    def setUp(self):
        self.lexicon = PolarityLexicon(vocabulary={'love': 3, 'bad': -3, 'good': 2})

    def test_lookup_is_case_insensitive(self):
        self.assertEqual(self.lexicon.valence('LOVE'), 3.0)

    def test_lookup_through_stem(self):
        self.assertEqual(self.lexicon.valence('loved'), 3.0)
        self.assertEqual(self.lexicon.valence('loving'), 3.0)

    def test_unknown_word(self):
        self.assertIsNone(self.lexicon.valence('beach'))
        self.assertNotIn('beach', self.lexicon)

    def test_polarity_is_average_over_all_tokens(self):
        # unknown tokens still count towards the length
        self.assertEqual(self.lexicon.polarity(['I', 'love', 'this', 'beach']), 0.75)

    def test_negation_flips_following_tokens(self):
        self.assertEqual(self.lexicon.polarity(['not', 'good']), -1.0)
        self.assertEqual(self.lexicon.polarity(['good', 'not', 'bad']), (2 + 3) / 3)

    def test_empty_polarity_is_zero(self):
        self.assertEqual(self.lexicon.polarity([]), 0.0)

    def test_default_lexicon_is_shared(self):
        self.assertIs(get_default_lexicon(), get_default_lexicon())


class SentimentScorerTestCase(SimpleTestCase):
    """Test cases for sentence classification and cumulative percentages"""

    def setUp(self):
        self.scorer = make_scorer({'love': 3, 'great': 3, 'bad': -3, 'nice': 1, 'meh': -1})

    def test_neutral_sentences_do_not_vote(self):
        # Only positive and negative totals decide the label
        result = self.scorer.score_text("I love this beach. It was okay.")

        self.assertEqual(result.label, SentimentLabel.POSITIVE)
        self.assertEqual(result.positive_percentage, 50.0)
        self.assertEqual(result.negative_percentage, 0.0)
        self.assertEqual(result.neutral_percentage, 50.0)
        self.assertEqual(len(result.sentences), 2)

    def test_positive_negative_tie_is_neutral(self):
        result = self.scorer.score_text("Great day. Bad night.")

        self.assertEqual(result.label, SentimentLabel.NEUTRAL)
        self.assertEqual(result.positive_percentage, 50.0)
        self.assertEqual(result.negative_percentage, 50.0)
        self.assertEqual(result.neutral_percentage, 0.0)

    def test_percentages_are_cumulative(self):
        result = self.scorer.score_text("Great day. Bad food. Bad room.")

        first, second, third = result.sentences
        self.assertEqual((first.positive_percentage, first.negative_percentage), (100.0, 0.0))
        self.assertEqual(first.label, SentimentLabel.POSITIVE)
        self.assertEqual((second.positive_percentage, second.negative_percentage), (50.0, 50.0))
        self.assertEqual(second.label, SentimentLabel.NEUTRAL)
        self.assertEqual((third.positive_percentage, third.negative_percentage), (33.33, 66.67))
        self.assertEqual(third.label, SentimentLabel.NEGATIVE)

        self.assertEqual(result.label, SentimentLabel.NEGATIVE)
        self.assertEqual(result.positive_percentage, 33.33)
        self.assertEqual(result.negative_percentage, 66.67)
        self.assertEqual(result.neutral_percentage, 0.0)

    def test_small_positive_score_floors_to_neutral(self):
        # 1 / 20 tokens = 0.05, floored to 0.0
        sentence = "nice " + " ".join(["word"] * 19)
        self.assertEqual(self.scorer.score_sentence(sentence), 0.0)
        self.assertEqual(self.scorer.score_text(sentence).label, SentimentLabel.NEUTRAL)

    def test_small_negative_score_floors_away_from_zero(self):
        sentence = "meh " + " ".join(["word"] * 19)
        self.assertEqual(self.scorer.score_sentence(sentence), -0.1)
        self.assertEqual(self.scorer.score_text(sentence).label, SentimentLabel.NEGATIVE)

    def test_whitespace_sentence_counts_as_neutral(self):
        result = self.scorer.score_text("Great day.  . Bad day.")

        self.assertEqual(len(result.sentences), 3)
        self.assertEqual(result.label, SentimentLabel.NEUTRAL)
        self.assertEqual(result.positive_percentage, 33.33)
        self.assertEqual(result.negative_percentage, 33.33)
        self.assertEqual(result.neutral_percentage, 33.33)

    def test_sentence_counts_sum_to_sentence_total(self):
        texts = [
            "Great.",
            "Great. Bad. Nothing here.",
            "Love it!\nBad weather?\nMeh\nGreat people. Calm night.",
        ]
        for text in texts:
            result = self.scorer.score_text(text)
            sentences = split_sentences(text)
            self.assertEqual(len(result.sentences), len(sentences))

            counts = [
                round(pct * len(sentences) / 100)
                for pct in (result.positive_percentage, result.negative_percentage, result.neutral_percentage)
            ]
            self.assertEqual(sum(counts), len(sentences))

    def test_score_is_deterministic(self):
        text = "Great food. Bad service. Love the view!"
        self.assertEqual(self.scorer.score_text(text), self.scorer.score_text(text))

    def test_empty_text_raises(self):
        for text in ["", "   ", "...", "\n\n"]:
            with self.assertRaises(EmptyTextError):
                self.scorer.score_text(text)

    def test_to_dict(self):
        result = self.scorer.score_text("Great day.")
        data = result.to_dict(include_sentences=True)

        self.assertEqual(data['sentiment'], 'positive')
        self.assertEqual(data['positive_percentage'], 100.0)
        self.assertEqual(data['sentences'][0]['label'], 'positive')
        self.assertEqual(data['sentences'][0]['sentence'], 'Great day')


class SentimentHelpersTestCase(SimpleTestCase):

    def test_to_percentage_rounds_half_up(self):
        self.assertEqual(to_percentage(1, 3), 33.33)
        self.assertEqual(to_percentage(2, 3), 66.67)
        self.assertEqual(to_percentage(1, 32), 3.13)
        self.assertEqual(to_percentage(0, 0), 0.0)

    def test_from_stored(self):
        result = SentimentResult.from_stored('positive', 80, 10, 10)
        self.assertEqual(result.label, SentimentLabel.POSITIVE)
        self.assertEqual(result.positive_percentage, 80.0)
        self.assertIsNone(SentimentResult.from_stored(None, None, None, None))


class AfinnScoringTestCase(SimpleTestCase):
    """Smoke tests against the bundled AFINN word list"""

    def test_positive_sentence(self):
        self.assertEqual(score_text("I love this beach.").label, SentimentLabel.POSITIVE)

    def test_negative_sentence(self):
        self.assertEqual(score_text("This was a terrible, awful day.").label, SentimentLabel.NEGATIVE)

    def test_unknown_words_are_neutral(self):
        self.assertEqual(score_text("Zxqv blorp.").label, SentimentLabel.NEUTRAL)

    def test_word_file_loads(self):
        vocabulary = load_afinn_vocabulary()
        self.assertGreater(len(vocabulary), 2000)
        self.assertGreater(vocabulary['love'], 0)
        self.assertLess(vocabulary['terrible'], 0)


class KeywordExtractorTestCase(SimpleTestCase):
    """Test cases for keyword extraction"""

    def test_extract_keywords(self):
        keywords = extract_keywords("The Beach was beautiful and the beach was calm, so calm!")
        self.assertEqual(keywords, ['beach', 'beautiful', 'calm'])

    def test_short_tokens_and_stopwords_removed(self):
        keywords = extract_keywords("We go to an old inn by the sea")
        self.assertEqual(keywords, ['old', 'inn', 'sea'])
        for word in keywords:
            self.assertNotIn(word, STOPWORDS)
            self.assertGreater(len(word), 2)

    def test_empty(self):
        self.assertEqual(extract_keywords(""), [])
        self.assertEqual(keyword_set(None), frozenset())

    def test_idempotent_on_own_output(self):
        text = "Sunset hikes along the rocky coast, then fresh seafood in the old harbour town."
        keywords = keyword_set(text)
        self.assertEqual(keyword_set(" ".join(sorted(keywords))), keywords)
