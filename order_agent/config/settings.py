"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SEED_ORDERS: Dict[str, Dict[str, str]] = {
    "123": {"status": "Shipped", "address": "123 Main St"},
    "456": {"status": "Processing", "address": "456 Elm St"},
}


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("ORDER_AGENT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """服务配置（使用 Pydantic）。"""

    # ---- Provider 相关配置 ----
    default_provider: str = Field(
        default="deepseek",
        description="默认使用的 Provider 名称",
    )
    intent_model: str = Field(
        default="intent-extract",
        description="意图抽取使用的逻辑模型名，由 registry 映射为具体厂商模型",
    )
    compose_model: str = Field(
        default="reply-compose",
        description="自然语言回复使用的逻辑模型名",
    )

    # DeepSeek
    deepseek_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("deepseek_api_key", "deepseekai_api_key"),
        description="DeepSeek API 密钥",
    )
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com",
        description="DeepSeek API 基础URL",
    )
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    # ---- 对话 ----
    max_context_messages: int = Field(
        default=20,
        ge=2,
        le=200,
        description="意图抽取会话保留的最大消息数（含 system 消息）",
    )
    prompt_locale: str = Field(default="zh", description="系统提示词语言目录")

    # ---- HTTP 服务 ----
    frontend_origin: str = Field(
        default="http://localhost:5173",
        description="允许跨域访问的前端地址",
    )
    host: str = Field(default="0.0.0.0", description="监听地址")
    port: int = Field(default=3000, ge=1, le=65535, description="监听端口")

    # ---- 订单初始数据 ----
    seed_orders: Dict[str, Dict[str, str]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_SEED_ORDERS.items()},
        description="进程启动时载入内存的订单，order_id -> {status, address}",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("deepseek_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = Settings()
