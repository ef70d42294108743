"""Prompt derivation and answer matching."""

from .matcher import find_matching_answer
from .prompts import PromptDeriver, TrainTimesPromptDeriver

__all__ = ["PromptDeriver", "TrainTimesPromptDeriver", "find_matching_answer"]
