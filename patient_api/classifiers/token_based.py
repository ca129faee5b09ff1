import re
from typing import Iterable, Sequence

import sqlparse
from sqlparse import tokens as T

from .base import (
    DISALLOWED_KEYWORD,
    DISALLOWED_KEYWORDS,
    KIND_NOT_ALLOWED,
    StatementClassifier,
    ValidationResult,
)

# MySQL runs the body of /*! ... */ and /*!50000 ... */ as SQL
EXECUTABLE_COMMENT_RE = re.compile(r"^/\*!\d*(.*?)\*/$", re.S)


class TokenStatementClassifier(StatementClassifier):
    """
    sqlparse-based classifier:
      - statement kind = first keyword of the first statement
      - blocked words only count as SQL keywords, not inside
        string literals, plain comments or identifiers
      - MySQL executable comments are parsed and scanned like SQL
    """

    def __init__(self, disallowed_keywords: Sequence[str] = DISALLOWED_KEYWORDS):
        self.disallowed_keywords = frozenset(k.upper() for k in disallowed_keywords)

    def classify(
        self,
        statement: str,
        allowed_kinds: Sequence[str],
    ) -> ValidationResult:
        parsed = [s for s in sqlparse.parse(statement) if s.value.strip()]
        if not parsed:
            return ValidationResult.rejected(KIND_NOT_ALLOWED)

        first = parsed[0].token_first(skip_ws=True, skip_cm=True)
        kinds = {kind.upper() for kind in allowed_kinds}
        if first is None or not first.is_keyword or first.normalized not in kinds:
            return ValidationResult.rejected(KIND_NOT_ALLOWED)

        # Later statements are scanned too: "SELECT 1; DROP TABLE x"
        if self._has_blocked_keyword(parsed):
            return ValidationResult.rejected(DISALLOWED_KEYWORD)

        return ValidationResult.accepted()

    def _has_blocked_keyword(self, statements: Iterable) -> bool:
        for stmt in statements:
            for token in stmt.flatten():
                if token.ttype in T.Comment:
                    match = EXECUTABLE_COMMENT_RE.match(token.value.strip())
                    if match and self._has_blocked_keyword(sqlparse.parse(match.group(1))):
                        return True
                    continue

                # multi-word keywords such as "ON DUPLICATE KEY UPDATE" arrive as one token
                if token.is_keyword and self.disallowed_keywords.intersection(
                    token.normalized.split()
                ):
                    return True
        return False
