# tid/__init__.py
"""Tid: 自描述、可校验的 128 位标识符编解码器。

标识符与标准 UUID 容器逐位兼容，内嵌可选的毫秒时间戳、随机数、
1 字节类型指纹、info 字节以及由密钥派生的校验标签，解码时无需任何外部查询。
"""

__version__ = "1.0.0"

from .core import Tid
from .exceptions import ConfigurationError, InvalidArgumentError, TidError
from .keyring import SecretKeyring, uniform_selector
from .types import PROTOCOL_VERSION, Mode, TidInfo

__all__ = [
    "__version__",
    "Tid",
    "TidInfo",
    "Mode",
    "PROTOCOL_VERSION",
    "SecretKeyring",
    "uniform_selector",
    "TidError",
    "ConfigurationError",
    "InvalidArgumentError",
]
