# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from .logger import get_logger
from .repeater import Repeater

logger = get_logger(__name__)


def handle_run_error(
    exception: BaseException,
    metadata: Repeater,
) -> None:
    """
    Report the failure of a single run and let the loop continue.
    """
    logger.error(exception)
    logger.debug(
        f"{len(metadata.encountered_errors)} of {len(metadata.items)} run(s) failed so far."
    )


def handle_file_error(
    exception: BaseException,
    metadata: Repeater,
) -> None:
    """
    Report a file that could not be processed and let the loop continue.
    """
    logger.error(exception)
    logger.debug(
        f"{len(metadata.encountered_errors)} of {len(metadata.items)} file(s) failed so far."
    )
