"""Text pipelines: sentence splitting, tokenization, recognition, sentiment."""

from .recognition import RecognitionPipeline, Recognizer, split_sentences
from .sentiment import SentimentClassifier, SentimentPipeline, to_simple_sentiment
from .tokenizer import simple_tokenize

__all__ = [
    "RecognitionPipeline",
    "Recognizer",
    "SentimentClassifier",
    "SentimentPipeline",
    "simple_tokenize",
    "split_sentences",
    "to_simple_sentiment",
]
