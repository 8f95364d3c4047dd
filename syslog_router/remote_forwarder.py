import logging
import socket
from typing import Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class RemoteForwarder:
    """Forward classified messages to a remote syslog collector over TCP"""

    def __init__(self, host: Optional[str] = None, port: int = 514,
                 timeout: Optional[float] = 5.0) -> None:
        self.host: Optional[str] = host
        self.port: int = port
        self.timeout: Optional[float] = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    @staticmethod
    def format_line(message: str, level: str) -> str:
        return f"{level} - syslog: {message}\n"

    def forward(self, message: str, level: str) -> bool:
        """
        Send one message over a fresh connection.
        Does nothing when no host is configured. Failures are logged and dropped.
        """
        if not self.enabled:
            return False

        payload = self.format_line(message, level).encode('utf-8')

        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout) as sock:
                sock.sendall(payload)
        except OSError as e:
            logger.error(f"Failed to forward to remote syslog server {self.host}:{self.port}: {e}")
            return False

        return True
