"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于在 API 层做统一捕获与 HTTP 映射。

注意：订单不存在（NotFound）属于业务结果，以 OrderNotFound 数据返回，
不在此处定义异常。
"""

from typing import Any, Optional


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_ARGUMENT"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 raw、operation 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


# ---- Provider 层 ----


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """第三方 API 返回非 2xx/429 错误时抛出。"""


class RateLimitError(BusinessError):
    """Provider 限流错误。本服务不做重试，直接失败当前请求。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""


# ---- 意图调用链路 ----


class ExtractionError(BusinessError):
    """模型输出无法解析为结构化意图。raw 字段保留原始文本用于排查。"""

    def __init__(self, message: str, raw: Optional[str] = None, **extra: Any):
        super().__init__(code="EXTRACTION_ERROR", message=message, http_status=500, raw=raw, **extra)
        self.raw = raw


class UnsupportedOperation(BusinessError):
    """识别出了 function_call 结构，但函数名不在支持列表中。"""

    def __init__(self, name: Any):
        super().__init__(
            code="UNSUPPORTED_OPERATION",
            message="Unsupported function",
            http_status=400,
            operation=name,
        )
        self.name = name


class MissingArgument(BusinessError):
    """已知操作缺少必填参数。"""

    def __init__(self, operation: str, missing: list[str]):
        super().__init__(
            code="MISSING_ARGUMENT",
            message=f"Missing {', '.join(missing)}",
            http_status=400,
            operation=operation,
            missing=missing,
        )
        self.operation = operation
        self.missing = missing


class CompositionError(BusinessError):
    """生成自然语言回复时模型调用失败。"""

    def __init__(self, message: str, **extra: Any):
        super().__init__(code="COMPOSITION_ERROR", message=message, http_status=502, **extra)
