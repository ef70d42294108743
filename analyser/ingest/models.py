"""Data models for uploaded inputs."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AnswerRecord(BaseModel):
    """One entry of the AI answer corpus.

    Corpus files name the fields either ``query``/``answer`` or
    ``prompt``/``response``; both spellings are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    query: str = Field(default="", validation_alias=AliasChoices("query", "prompt"))
    answer: str = Field(default="", validation_alias=AliasChoices("answer", "response"))
