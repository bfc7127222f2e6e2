import pytest
from loguru import logger

from ficsitfetch.logger import DEBUG_ENV, resolve_level, setup_logger


@pytest.fixture
def messages():
    captured = []
    yield captured
    logger.remove()


def test_resolve_level(monkeypatch):
    monkeypatch.delenv(DEBUG_ENV, raising=False)
    assert resolve_level() == "INFO"
    assert resolve_level(debug=True) == "DEBUG"

    monkeypatch.setenv(DEBUG_ENV, "1")
    assert resolve_level() == "DEBUG"


def test_info_level_hides_debug(messages):
    setup_logger("INFO", sink=messages.append, colorize=False)

    logger.debug("[缓存] 命中: getMod(SML)")
    logger.info("已安装 SML 2.0.0")

    assert len(messages) == 1
    assert "已安装 SML 2.0.0" in messages[0]


def test_debug_level_includes_source(messages):
    setup_logger("DEBUG", sink=messages.append, colorize=False)

    logger.debug("[缓存] 命中: getMod(SML)")

    assert "[日志] 级别 DEBUG" in messages[0]
    assert "test_logger" in messages[-1]
    assert "getMod(SML)" in messages[-1]
