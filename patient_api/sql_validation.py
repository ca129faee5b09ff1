import logging
from typing import Dict, Optional, Sequence, Type

from .classifiers.base import QUERY_MISSING, StatementClassifier, ValidationResult
from .classifiers.lexical import LexicalStatementClassifier
from .classifiers.token_based import TokenStatementClassifier

logger = logging.getLogger("patient_api.sql_validation")

# Allow-lists per HTTP method on /api/query
ALLOWED_GET_KINDS = ("SELECT",)
ALLOWED_POST_KINDS = ("INSERT",)

DEFAULT_CLASSIFIER = "lexical"

CLASSIFIERS: Dict[str, Type[StatementClassifier]] = {
    "lexical": LexicalStatementClassifier,
    "token": TokenStatementClassifier,
}


def get_classifier(name: Optional[str] = None) -> StatementClassifier:
    key = (name or DEFAULT_CLASSIFIER).lower()
    if key not in CLASSIFIERS:
        logger.warning("Unknown SQL classifier '%s', using '%s'", name, DEFAULT_CLASSIFIER)
        key = DEFAULT_CLASSIFIER
    return CLASSIFIERS[key]()


def validate_sql(
    statement: str,
    allowed_kinds: Sequence[str],
    classifier: Optional[StatementClassifier] = None,
) -> ValidationResult:
    """
    Decide whether a statement may run for the given allow-list.
    - No empty queries
    - Kind and keyword checks are delegated to the classifier
      (lexical prefix/substring matching unless told otherwise)
    """
    if not isinstance(statement, str) or not statement.strip():
        return ValidationResult.rejected(QUERY_MISSING)

    classifier = classifier or get_classifier()
    return classifier.classify(statement, allowed_kinds)
