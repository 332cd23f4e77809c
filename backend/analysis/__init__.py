"""
Text analysis core: sentence/word tokenization, lexicon based sentiment scoring
and keyword extraction. Nothing in this package touches the database.
"""
