# tid/exceptions.py
"""
本模块定义了 Tid 项目中所有自定义的、语义化的异常类型。

注意：数据层面的问题（篡改、类型不符、未知密钥）从不以异常形式抛出，
而是通过 `TidInfo` 上的布尔字段返回给调用者。这里的异常只表示调用方的
编程错误或配置错误。
"""


class TidError(Exception):
    """
    所有 Tid 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """
    pass


class ConfigurationError(TidError):
    """
    表示密钥环或编解码器配置无效。
    例如，密钥数量不在 1-16 之间，或者密钥索引超出 0-15 的范围。
    """
    pass


class InvalidArgumentError(TidError, ValueError):
    """
    表示 `generate` / `decode` 的调用前置条件被违反。
    继承自 ValueError 是为了保持与标准库参数校验行为的一致性。
    """
    pass
