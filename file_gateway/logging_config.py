import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configures the root logger for the service.
    basicConfig is a no-op once handlers exist, so repeated app creation is safe.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    # Silence noisy libraries
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
