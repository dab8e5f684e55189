"""拓扑引擎异常定义。

参数错误和结构错误分开定义，调用方可以区分"传入了非法值"和
"访问了图中不存在的结构"两类问题。
"""

from numbers import Integral


class InvalidParameterError(ValueError):
    """非法参数（负的ID、带宽或延迟等），属于调用方的编程错误，不应重试"""
    pass


class TopologyStructureError(LookupError):
    """访问了拓扑图中不存在的节点或矩阵行列"""
    pass


def require_non_negative_id(value: int, name: str) -> None:
    """检查实体ID或节点ID是否为非负整数

    Args:
        value: 待检查的ID
        name: 参数名，用于错误信息

    Raises:
        InvalidParameterError: ID为负数或不是整数
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidParameterError(f"{name}必须是整数：{value!r}")
    if value < 0:
        raise InvalidParameterError(f"{name}不能为负数：{value}")
