"""Provider 与模型配置。

本模块将“逻辑模型名”与“具体厂商模型名”解耦：

- 逻辑名（logical_name）：链路里使用的名称，例如 "intent-extract"。
- provider_model：厂商实际提供的模型 ID，例如 "deepseek-chat"。

意图抽取需要稳定输出，温度取 0；回复生成保留一定的随机性。"""

from dataclasses import dataclass
from typing import Dict, Mapping

from order_agent.domain.exceptions import ValidationError


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    max_tokens: int
    default_temperature: float


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]

    def model(self, logical_name: str) -> ModelConfig:
        try:
            return self.models[logical_name]
        except KeyError:
            raise ValidationError(
                code="UNKNOWN_MODEL",
                message=f"Unknown model {logical_name!r} for provider {self.name!r}",
                http_status=500,
            )


DEEPSEEK_CONFIG = ProviderConfig(
    name="deepseek",
    base_url="https://api.deepseek.com",
    models={
        "intent-extract": ModelConfig(
            logical_name="intent-extract",
            provider_model="deepseek-chat",
            max_tokens=512,
            default_temperature=0.0,
        ),
        "reply-compose": ModelConfig(
            logical_name="reply-compose",
            provider_model="deepseek-chat",
            max_tokens=1024,
            default_temperature=0.7,
        ),
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "deepseek": DEEPSEEK_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")
