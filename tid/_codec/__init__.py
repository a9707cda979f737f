# tid/_codec/__init__.py
"""
标识符编解码的底层组件：类型指纹、带密钥的摘要和 16 字节位布局。

这些模块不做参数校验，由 `tid.core.Tid` 负责前置条件检查。
"""
