# core/errors.py
from __future__ import annotations


class IngestError(ValueError):
    """
    Fatal ingestion error.
    `code` is a stable identifier the API layer passes through to clients.
    """

    code = "INGEST_FAILED"
    default_message = "Exam text could not be parsed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class EmptyInputError(IngestError):
    code = "EMPTY_INPUT"
    default_message = "Exam text is empty"


class NoAnswerKeyError(IngestError):
    code = "NO_ANSWER_KEY"
    default_message = "No answer key found (expected a 'ВІДПОВІДІ' / 'ANSWERS' section)"


class NoQuestionsError(IngestError):
    code = "NO_QUESTIONS"
    default_message = "No numbered questions were detected"
