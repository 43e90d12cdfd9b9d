import logging
from rich.console import Console
from rich.logging import RichHandler
def setup_logging(level: str = "INFO"):
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])
    return logging.getLogger("testrun_reporter")
