"""系统提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取对应的 system prompt 文本，
用于构造 ChatMessage(role="system")。
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal


PROMPTS_DIR = Path(__file__).resolve().parent

PromptKind = Literal["intent", "compose"]

_FILES = {
    "intent": "intent_system.md",
    "compose": "compose_system.md",
}


@lru_cache(maxsize=None)
def load_system_prompt(kind: PromptKind, locale: str = "zh") -> str:
    """根据提示词类型和语言加载系统提示词文本。

    - intent: 意图抽取，约束模型只输出 function_call JSON。
    - compose: 回复生成，约束模型用自然语言回答。
    """

    fname = PROMPTS_DIR / locale / _FILES[kind]
    return fname.read_text(encoding="utf-8").strip()
