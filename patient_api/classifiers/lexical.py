from typing import Sequence

from .base import (
    DISALLOWED_KEYWORD,
    DISALLOWED_KEYWORDS,
    KIND_NOT_ALLOWED,
    StatementClassifier,
    ValidationResult,
)


class LexicalStatementClassifier(StatementClassifier):
    """
    Prefix + substring filter on the upper-cased statement.

    Blocked keywords match anywhere in the text, so literals and identifiers
    that contain one (e.g. ``created_at`` or ``'Dropbox'``) are rejected too.
    """

    def __init__(self, disallowed_keywords: Sequence[str] = DISALLOWED_KEYWORDS):
        self.disallowed_keywords = tuple(k.upper() for k in disallowed_keywords)

    def classify(
        self,
        statement: str,
        allowed_kinds: Sequence[str],
    ) -> ValidationResult:
        normalized = statement.strip().upper()

        if not any(normalized.startswith(kind.upper()) for kind in allowed_kinds):
            return ValidationResult.rejected(KIND_NOT_ALLOWED)

        for keyword in self.disallowed_keywords:
            if keyword in normalized:
                return ValidationResult.rejected(DISALLOWED_KEYWORD)

        return ValidationResult.accepted()
