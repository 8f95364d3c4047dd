import logging
import select
import socket
import threading
from typing import Optional, Tuple

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

BUFFER_SIZE = 2048


class TCPSyslogReceiver:
    """
    Receive syslog messages over TCP, one message per connection.

    Every accepted connection is handled on its own thread, which reads a
    single buffer of at most BUFFER_SIZE bytes and closes the connection.
    There is no framing: anything the peer sends after the first read is
    discarded.
    """

    def __init__(self, host: str = '0.0.0.0', port: int = 514,
                 dispatcher: Optional[object] = None,
                 max_concurrency: Optional[int] = None,
                 read_timeout: Optional[float] = None) -> None:
        """
        Initialize TCP syslog receiver.

        Args:
            host: Interface to bind to
            port: TCP port to listen on, 0 picks a free port
            dispatcher: MessageDispatcher receiving each message
            max_concurrency: Cap on concurrent connection handlers.
                             None keeps the unbounded one-thread-per-connection behaviour.
            read_timeout: Seconds to wait for a peer to send its message.
                          None waits forever.
        """
        self.host: str = host
        self.port: int = port
        self.dispatcher: Optional[object] = dispatcher
        self.read_timeout: Optional[float] = read_timeout
        self.running: bool = False
        self.sock: Optional[socket.socket] = None
        self.slots: Optional[threading.BoundedSemaphore] = (
            threading.BoundedSemaphore(max_concurrency) if max_concurrency else None
        )

    def bind(self) -> None:
        """Create and bind the listening socket. Raises OSError on failure."""
        if self.sock is not None:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
            sock.listen(128)
        except OSError:
            sock.close()
            raise
        sock.setblocking(False)

        self.port = sock.getsockname()[1]
        self.sock = sock
        logger.info(f"Syslog server started on TCP port {self.port}")

    def start(self) -> None:
        """Start the TCP syslog receiver"""
        self.bind()
        self.running = True

        while self.running:
            try:
                readable, _, _ = select.select([self.sock], [], [], 1.0)
                if not readable:
                    continue

                client_sock, client_addr = self.sock.accept()
            except BlockingIOError:
                continue
            except Exception as e:
                if self.running:
                    logger.error(f"Failed to accept TCP connection: {e}")
                continue

            self._spawn_handler(client_sock, client_addr)

        self.sock.close()
        self.sock = None

    def _spawn_handler(self, client_sock: socket.socket, client_addr: Tuple[str, int]) -> None:
        if self.slots is not None:
            self.slots.acquire()

        handler = threading.Thread(
            target=self._handle_connection,
            args=(client_sock, client_addr),
            daemon=True
        )
        try:
            handler.start()
        except RuntimeError as e:
            logger.error(f"Could not start handler for {client_addr}: {e}")
            client_sock.close()
            self._release_slot()

    def _handle_connection(self, sock: socket.socket, addr: Tuple[str, int]) -> None:
        """Read a single message from the connection, then close it"""
        try:
            sock.settimeout(self.read_timeout)
            data = sock.recv(BUFFER_SIZE)
            if not data:
                logger.debug(f"Connection from {addr} closed without data")
                return

            message = data.decode('utf-8', errors='replace').strip()
            if self.dispatcher:
                self.dispatcher.dispatch(message)

        except OSError as e:
            logger.error(f"Failed to read TCP message from {addr}: {e}")
        except Exception as e:
            logger.error(f"Error processing message from {addr}: {e}", exc_info=True)
        finally:
            sock.close()
            self._release_slot()

    def _release_slot(self) -> None:
        if self.slots is not None:
            self.slots.release()

    def stop(self) -> None:
        """Stop the receiver"""
        self.running = False
