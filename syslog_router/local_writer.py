import logging
from datetime import datetime
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class LocalLogWriter:
    """Append classified messages to a local text log"""

    def __init__(self, path: str = 'syslog.log') -> None:
        """
        Initialize the local writer.

        Args:
            path: Log file to append to. Its parent directory is created
                  if missing.
        """
        self.path: Path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def format_line(message: str, level: str, timestamp: datetime) -> str:
        return f"{timestamp.strftime(TIMESTAMP_FORMAT)} - {level} - syslog: {message}\n"

    def write(self, message: str, level: str) -> bool:
        """
        Append one line to the log file.
        The file is opened and closed on every call, no handle is kept.
        Returns False if the write failed.
        """
        line = self.format_line(message, level, datetime.now())

        try:
            with open(self.path, 'a', encoding='utf-8') as f:
                f.write(line)
        except OSError as e:
            logger.error(f"I/O error writing to {self.path}: {e}")
            return False

        logger.debug(f"Wrote message to {self.path}")
        return True
