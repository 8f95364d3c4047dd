import re
from typing import Pattern, Sequence

PLACEHOLDER_PATTERN: Pattern[str] = re.compile(r'\$(\d+)')


def substitute(template: str, tokens: Sequence[str]) -> str:
    """
    Replace positional placeholders ($0, $1, ...) with message tokens.

    Placeholders are matched as whole numbers, so `$1` never eats the
    prefix of `$10`. Indices without a token are left untouched.
    """
    if not tokens or '$' not in template:
        return template

    def _replace(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(tokens):
            return tokens[index]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, template)
