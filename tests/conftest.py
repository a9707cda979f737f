# tests/conftest.py
"""项目全局共享的测试 Fixtures。"""

import itertools
import logging
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
import structlog
from pytest_mock import MockerFixture
from rich.console import Console

from tid import Tid

FIXED_MILLIS = 1_700_000_000_000


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """每个测试结束后恢复 structlog 的默认配置，并移除 CLI 留下的根日志处理器。"""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def fixed_millis() -> int:
    return FIXED_MILLIS


@pytest.fixture
def ticking_clock() -> Callable[[], int]:
    """一个每次调用前进 1 毫秒的确定性时钟。"""
    counter: Iterator[int] = itertools.count(FIXED_MILLIS)
    return lambda: next(counter)


@pytest.fixture
def zero_random() -> Callable[[int], bytes]:
    """返回全零字节的确定性随机源。"""
    return lambda n: bytes(n)


@pytest.fixture
def codec() -> Tid:
    """使用单个密钥 {0: "topSecret"} 的编解码器。"""
    return Tid({0: "topSecret"})


@pytest.fixture
def deterministic_codec(
    ticking_clock: Callable[[], int], zero_random: Callable[[int], bytes]
) -> Tid:
    """时钟、随机源和密钥选择都固定的编解码器。"""
    return Tid(
        {0: b"topSecret", 5: b"rotated"},
        clock=ticking_clock,
        selector=lambda indices: indices[-1],
        random_source=zero_random,
    )
