"""
Exceptions raised by the text analysis core.
"""


class AnalysisError(Exception):
    """Base class for text analysis failures"""


class EmptyTextError(AnalysisError):
    """Raised when a text contains no sentences to score"""

    def __init__(self, message: str = "Text is empty; nothing to analyze"):
        super().__init__(message)
