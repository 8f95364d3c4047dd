import logging
from typing import Optional

from .classifier import ClassificationResult, Classifier, tokenize
from .database_writer import DatabaseWriter
from .local_writer import LocalLogWriter
from .remote_forwarder import RemoteForwarder

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MessageDispatcher:
    """
    Classify one raw message and fan the result out to the sinks.

    Sinks are independent: each one handles its own failures, so a failed
    database insert never prevents the local write (or the other way round).
    The remote forwarder is only used when forward_remote is set.
    """

    def __init__(self,
                 classifier: Classifier,
                 local_writer: Optional[LocalLogWriter] = None,
                 database_writer: Optional[DatabaseWriter] = None,
                 forwarder: Optional[RemoteForwarder] = None,
                 forward_remote: bool = False) -> None:
        self.classifier: Classifier = classifier
        self.local_writer: Optional[LocalLogWriter] = local_writer
        self.database_writer: Optional[DatabaseWriter] = database_writer
        self.forwarder: Optional[RemoteForwarder] = forwarder
        self.forward_remote: bool = forward_remote

    def dispatch(self, message: str) -> ClassificationResult:
        """Process a single message and return its classification"""
        logger.debug(f"Received message: {message}")

        result = self.classifier.classify(tokenize(message))
        logger.info(f"Parsed message: {result.message}, Level: {result.level}")

        if self.local_writer:
            self.local_writer.write(result.message, result.level)

        if self.database_writer:
            self.database_writer.write(result.message, result.level)

        if self.forward_remote and self.forwarder:
            self.forwarder.forward(result.message, result.level)

        return result
