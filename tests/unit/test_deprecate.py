"""Unit tests for deprecation warnings."""
from unittest.mock import patch

from flamelink.utils.deprecate import deprecate


def test_logs_deprecation_warning_for_method_and_message():
    with patch("flamelink.utils.deprecate.logger") as logger:
        deprecate("fire", 'Rather use "ice()"')

    logger.warning.assert_called_once_with(
        "method_deprecated",
        method="fire",
        detail=(
            '[FLAMELINK] The "fire" method is deprecated and will be removed '
            'in the next major version. Rather use "ice()"'
        ),
    )
