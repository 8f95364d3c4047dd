from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .condition_evaluator import evaluate
from .rule_loader import LogicEntry
from .variable_substituter import substitute

FALLBACK_LEVEL = 'info'


@dataclass(frozen=True)
class ClassificationResult:
    message: str
    level: str


def tokenize(message: str) -> List[str]:
    """Split a raw message on runs of whitespace"""
    return message.split()


def classify(rules: Sequence[LogicEntry], tokens: Sequence[str]) -> ClassificationResult:
    """
    Return the substituted message and level of the first matching rule.
    Include directives are skipped. Without a match, the tokens are joined
    back with single spaces at level 'info'.
    """
    for rule in rules:
        if rule.is_include:
            continue
        if evaluate(rule.condition, tokens):
            return ClassificationResult(
                message=substitute(rule.message, tokens),
                level=substitute(rule.level, tokens),
            )

    return ClassificationResult(message=' '.join(tokens), level=FALLBACK_LEVEL)


class Classifier:
    """Classify messages against a loaded, read-only rule list"""

    def __init__(self, rules: Sequence[LogicEntry]) -> None:
        self.rules: Tuple[LogicEntry, ...] = tuple(rules)

    def classify(self, tokens: Sequence[str]) -> ClassificationResult:
        return classify(self.rules, tokens)

    def classify_message(self, message: str) -> ClassificationResult:
        return classify(self.rules, tokenize(message))
