import io
import logging

from lottery_vault.logging_config import configure_logging


def test_single_handler_with_level_name():
    stream = io.StringIO()
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug", stream=stream)
        configure_logging("debug", stream=stream)

        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

        logging.getLogger("lottery_vault.test").debug("hello %s", "there")
        line = stream.getvalue().strip()
        assert line.endswith("| DEBUG    | lottery_vault.test: hello there")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
