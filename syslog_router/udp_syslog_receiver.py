import logging
import socket
import threading
from typing import Optional, Tuple

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

BUFFER_SIZE = 2048


class UDPSyslogReceiver:
    """Receive syslog messages over UDP, one handler thread per datagram"""

    def __init__(self, host: str = '0.0.0.0', port: int = 514,
                 dispatcher: Optional[object] = None,
                 max_concurrency: Optional[int] = None) -> None:
        """
        Initialize UDP syslog receiver.

        Args:
            host: Interface to bind to
                  - '0.0.0.0' = All interfaces (default, required for containers)
                  - '127.0.0.1' = Localhost only (development)
            port: UDP port to listen on, 0 picks a free port
            dispatcher: MessageDispatcher receiving each message
            max_concurrency: Cap on concurrent datagram handlers, None for unbounded

        Datagrams larger than BUFFER_SIZE bytes are truncated.
        """
        self.host: str = host
        self.port: int = port
        self.dispatcher: Optional[object] = dispatcher
        self.running: bool = False
        self.sock: Optional[socket.socket] = None
        self.slots: Optional[threading.BoundedSemaphore] = (
            threading.BoundedSemaphore(max_concurrency) if max_concurrency else None
        )

    def bind(self) -> None:
        """Create and bind the socket. Raises OSError on failure."""
        if self.sock is not None:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        sock.settimeout(1.0)

        self.port = sock.getsockname()[1]
        self.sock = sock
        logger.info(f"Syslog server started on UDP port {self.port}")

    def start(self) -> None:
        """Start the UDP syslog receiver"""
        self.bind()
        self.running = True

        while self.running:
            try:
                data, addr = self.sock.recvfrom(BUFFER_SIZE)
            except socket.timeout:
                continue
            except Exception as e:
                if self.running:
                    logger.error(f"Failed to read UDP message: {e}")
                continue

            self._spawn_handler(data, addr)

        self.sock.close()
        self.sock = None

    def _spawn_handler(self, data: bytes, addr: Tuple[str, int]) -> None:
        if self.slots is not None:
            self.slots.acquire()

        handler = threading.Thread(
            target=self._process_datagram,
            args=(data, addr),
            daemon=True
        )
        try:
            handler.start()
        except RuntimeError as e:
            logger.error(f"Could not start handler for datagram from {addr}: {e}")
            self._release_slot()

    def _process_datagram(self, data: bytes, addr: Tuple[str, int]) -> None:
        """Process a single datagram"""
        try:
            message = data[:BUFFER_SIZE].decode('utf-8', errors='replace').strip()
            if self.dispatcher:
                self.dispatcher.dispatch(message)
        except Exception as e:
            logger.error(f"Error processing datagram from {addr}: {e}", exc_info=True)
        finally:
            self._release_slot()

    def _release_slot(self) -> None:
        if self.slots is not None:
            self.slots.release()

    def stop(self) -> None:
        """Stop the receiver"""
        self.running = False
