"""模型输出清洗。

模型是自由文本生成器，即使要求只返回 JSON，也可能带上说明文字、
Markdown 代码块或 <think> 推理段。清洗按固定顺序执行：

1. 截取第一个 "{" 到最后一个 "}" 之间的内容；
2. 去掉 ```json 与 ``` 标记；
3. 去掉 <think>...</think> 推理段；
4. 去掉开头空白。

找不到花括号或 JSON 解析失败时抛出 ExtractionError（携带原始文本），
不做进一步的猜测修复。
"""

import json
import re
from typing import Any, Dict, Optional

from order_agent.domain.exceptions import ExtractionError


JSON_BLOCK_RE = re.compile(r"{[\s\S]*}")
FENCE_JSON_RE = re.compile(r"```json")
FENCE_RE = re.compile(r"```")
THINK_RE = re.compile(r"<think>[\s\S]*</think>")
LEADING_WS_RE = re.compile(r"^\s*")


def extract_json_block(text: str) -> Optional[str]:
    match = JSON_BLOCK_RE.search(text or "")
    return match.group(0) if match else None


def strip_markup(block: str) -> str:
    # 删除推理段后两侧文本可能重新拼出 ``` 标记，重复执行直到不再变化
    while True:
        cleaned = FENCE_JSON_RE.sub("", block)
        cleaned = FENCE_RE.sub("", cleaned)
        cleaned = THINK_RE.sub("", cleaned)
        cleaned = LEADING_WS_RE.sub("", cleaned, count=1)
        if cleaned == block:
            return cleaned
        block = cleaned


def sanitize(text: str) -> Optional[str]:
    """返回清洗后的 JSON 文本；没有花括号内容时返回 None。"""

    block = extract_json_block(text)
    if block is None:
        return None
    return strip_markup(block)


def parse_payload(raw: Optional[str]) -> Dict[str, Any]:
    """清洗并解析模型输出，返回 JSON 对象。"""

    if not raw:
        raise ExtractionError("No response from AI", raw=raw)
    cleaned = sanitize(raw)
    if cleaned is None:
        raise ExtractionError("No JSON found in AI response", raw=raw)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Malformed JSON in AI response: {e.msg}", raw=raw) from e
    if not isinstance(payload, dict):
        raise ExtractionError("AI response is not a JSON object", raw=raw)
    return payload
