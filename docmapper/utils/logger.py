import logging

logger = logging.getLogger("docmapper")


def get_logger(name: str) -> logging.Logger:
    """
    Get a child of the package logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if name.startswith("docmapper."):
        name = name[len("docmapper."):]
    return logger.getChild(name)
