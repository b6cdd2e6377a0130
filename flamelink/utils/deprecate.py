"""Deprecation notices for renamed API methods."""
from flamelink.utils.logging import get_logger

logger = get_logger()


def deprecate(method: str = "", message: str = "") -> None:
    """Log a deprecation warning for `method`."""
    logger.warning(
        "method_deprecated",
        method=method,
        detail=(
            f'[FLAMELINK] The "{method}" method is deprecated and will be removed '
            f"in the next major version. {message}"
        ).strip(),
    )
