import logging
import re
from functools import lru_cache
from typing import Optional, Pattern

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class WildcardMatcher:
    """
    Match strings against wildcard expressions.
    `*` matches any sequence (including empty), `?` matches exactly one
    character and `.` is a literal dot. The whole candidate must match.
    """

    @staticmethod
    def to_regex(pattern: str) -> str:
        """Translate a wildcard expression into an anchored regular expression"""
        # Order matters: dots are escaped before `?` turns into a regex dot
        pattern = pattern.replace('.', '\\.')
        pattern = pattern.replace('*', '.*')
        pattern = pattern.replace('?', '.')
        return '^' + pattern + '$'

    @classmethod
    def matches(cls, candidate: str, pattern: str) -> bool:
        """
        Check whether candidate matches the wildcard pattern.
        A pattern that does not compile is logged and treated as no match.
        """
        compiled = cls._compile(pattern)
        if compiled is None:
            return False

        is_match = compiled.fullmatch(candidate) is not None
        logger.debug(f"'{candidate}' matches wildcard '{pattern}': {is_match}")
        return is_match

    @classmethod
    def _compile(cls, pattern: str) -> Optional[Pattern[str]]:
        try:
            return _compile_regex(cls.to_regex(pattern))
        except (re.error, OverflowError, RecursionError) as e:
            logger.error(f"Invalid wildcard pattern '{pattern}': {e}")
            return None


@lru_cache(maxsize=512)
def _compile_regex(regex: str) -> Pattern[str]:
    return re.compile(regex)
