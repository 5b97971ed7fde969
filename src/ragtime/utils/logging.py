import sys

from loguru import logger

CLI_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
LAMBDA_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {extra[correlation_id]} | {name}:{function} - {message}"


def configure_logging(verbose: bool = False) -> None:
    """Route loguru to stderr; WARNING by default so command output stays clean."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING", format=CLI_FORMAT)


def configure_lambda_logging(level: str = "INFO") -> None:
    """Plain-text sink for CloudWatch with the bound correlation id"""
    logger.remove()
    logger.configure(extra={"correlation_id": "-"})
    logger.add(sys.stdout, level=level, format=LAMBDA_FORMAT)
