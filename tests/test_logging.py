"""Unit tests for the component logger helper."""

from unittest.mock import MagicMock

import quickask._logging as qlog
from quickask._logging import get_component_logger


class TestComponentLogger:
    def test_binds_component_on_injected_logger(self):
        base = MagicMock()

        log = get_component_logger("SessionStore", base)

        base.bind.assert_called_once_with(component="SessionStore")
        assert log is base.bind.return_value

    def test_single_public_helper(self):
        assert not hasattr(qlog, "get_logger")
