"""Input normalization for uploaded URL lists and answer corpora."""

from .models import AnswerRecord
from .parser import parse_answer_corpus, parse_url_list

__all__ = ["AnswerRecord", "parse_answer_corpus", "parse_url_list"]
