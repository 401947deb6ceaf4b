from qatree.core import config

def test_config_values():
    assert config.API_PREFIX.startswith("/")
    assert config.READABLE_CHOICE_PREFIX == "Selected: "
    assert config.LOG_LEVEL == config.LOG_LEVEL.upper()

def test_configure_logging_is_idempotent(monkeypatch):
    import logging
    monkeypatch.setattr(config, "LOG_LEVEL", "NONE")
    config.configure_logging()
    logger = logging.getLogger("qatree")
    count = len(logger.handlers)
    config.configure_logging()
    config.configure_logging()
    assert len(logger.handlers) == count == 1
