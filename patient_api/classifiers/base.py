from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Sequence

# Rejection reasons
QUERY_MISSING = "query missing"
KIND_NOT_ALLOWED = "statement kind not allowed"
DISALLOWED_KEYWORD = "disallowed keyword present"

DISALLOWED_KEYWORDS = ("UPDATE", "DELETE", "DROP", "ALTER", "TRUNCATE", "CREATE")


class ValidationResult(NamedTuple):
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def accepted(cls) -> "ValidationResult":
        return cls(True, None)

    @classmethod
    def rejected(cls, reason: str) -> "ValidationResult":
        return cls(False, reason)


class StatementClassifier(ABC):
    """
    Classifier interface. All classifiers must implement classify().
    """

    @abstractmethod
    def classify(
        self,
        statement: str,
        allowed_kinds: Sequence[str],
    ) -> ValidationResult:
        """
        :param statement: raw, non-empty SQL text
        :param allowed_kinds: statement kinds permitted, e.g. ("SELECT",)
        :return: accepted, or rejected with one of the reason constants
        """
        pass
