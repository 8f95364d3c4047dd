from typing import Sequence

from .variable_substituter import substitute
from .wildcard_matcher import WildcardMatcher

DEFAULT_CONDITION = 'default'
CONDITION_SEPARATOR = '=='


def evaluate(condition: str, tokens: Sequence[str]) -> bool:
    """
    Evaluate a rule condition against message tokens.

    `default` always matches. Anything else must have the form LEFT==RIGHT:
    LEFT gets placeholder substitution, RIGHT is the wildcard pattern.
    Malformed conditions simply do not match.
    """
    if condition == DEFAULT_CONDITION:
        return True

    parts = condition.split(CONDITION_SEPARATOR)
    if len(parts) != 2:
        return False

    left = substitute(parts[0].strip(), tokens)
    right = parts[1].strip()
    return WildcardMatcher.matches(left, right)
