"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供厂商的具体实现 (deepseek_client)。
"""

from typing import Optional

from order_agent.config.settings import settings
from order_agent.domain.exceptions import ValidationError
from order_agent.providers.base import ProviderClient
from order_agent.providers.deepseek_client import DeepSeekClient


def create_provider(name: Optional[str] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider。"""

    provider_name = (name or getattr(settings, "default_provider", "deepseek")).lower()
    if provider_name == "deepseek":
        return DeepSeekClient(settings)
    raise ValidationError(
        code="UNKNOWN_PROVIDER",
        message=f"Unknown provider: {provider_name!r}",
        http_status=500,
    )
