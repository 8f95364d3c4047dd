import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LoadError(Exception):
    """Rule document could not be read or parsed"""


class IncludeCycleError(LoadError):
    """Rule document includes itself, directly or through other documents"""


@dataclass(frozen=True)
class LogicEntry:
    """One entry of a rule document: either a rule or an include directive"""
    condition: str = ''
    message: str = ''
    level: str = ''
    include: Optional[str] = None

    @property
    def is_include(self) -> bool:
        return bool(self.include)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LogicEntry':
        """Build an entry from a decoded JSON object. Raises TypeError on non-string fields."""
        fields = {}
        for name in ('condition', 'message', 'level', 'include'):
            value = data.get(name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"'{name}' must be a string, got {type(value).__name__}")
            fields[name] = value or ''

        return cls(
            condition=fields['condition'],
            message=fields['message'],
            level=fields['level'],
            include=fields['include'] or None,
        )


class RuleLoader:
    """
    Load rule documents and flatten their include directives.

    A rule document is JSON of the form:
        {"logic": [{"condition": ..., "message": ..., "level": ...},
                   {"include": "other.rules"}]}

    Includes resolve relative to the directory of the file that names them.
    The flattened list holds the file's own rules in order, followed by the
    flattened rules of each include in the order the directives appear.
    """

    @classmethod
    def load(cls, path: str) -> List[LogicEntry]:
        """Load the document at path and return its flattened rule list"""
        rules = cls._load(path, ())
        logger.info(f"Loaded {len(rules)} rules from {path}")
        return rules

    @classmethod
    def read_document(cls, path: str) -> List[LogicEntry]:
        """Read a single document without expanding its includes"""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise LoadError(f"failed to read rules file {path}: {e}") from e
        except ValueError as e:
            raise LoadError(f"failed to parse rules file {path}: {e}") from e

        if not isinstance(data, dict):
            raise LoadError(f"failed to parse rules file {path}: expected a JSON object")

        logic = data.get('logic')
        if logic is None:
            logic = []
        if not isinstance(logic, list):
            raise LoadError(f"failed to parse rules file {path}: 'logic' must be a list")

        entries: List[LogicEntry] = []
        for position, item in enumerate(logic):
            if not isinstance(item, dict):
                raise LoadError(
                    f"failed to parse rules file {path}: entry {position} is not an object"
                )
            try:
                entries.append(LogicEntry.from_dict(item))
            except TypeError as e:
                raise LoadError(
                    f"failed to parse rules file {path}: entry {position}: {e}"
                ) from e
        return entries

    @classmethod
    def _load(cls, path: str, chain: Tuple[str, ...]) -> List[LogicEntry]:
        real_path = os.path.realpath(path)
        if real_path in chain:
            raise IncludeCycleError(
                f"include cycle detected: {' -> '.join(chain + (real_path,))}"
            )
        chain = chain + (real_path,)

        entries = cls.read_document(path)
        rules = [entry for entry in entries if not entry.is_include]

        rules_dir = os.path.dirname(path)
        for entry in entries:
            if not entry.is_include:
                continue
            include_path = os.path.join(rules_dir, entry.include)
            logger.debug(f"Including {include_path} from {path}")
            rules.extend(cls._load(include_path, chain))

        return rules
