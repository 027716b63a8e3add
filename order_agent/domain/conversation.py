from dataclasses import dataclass, field
from typing import Optional, List, Protocol
from threading import Lock

from .models import ChatMessage


@dataclass
class Conversation:
    """按会话隔离的意图抽取对话历史。

    不变量：messages 以且仅以一条 system 消息开头（首次使用时插入），
    之后只追加 user 消息。超过 max_messages 时淘汰最早的 user 消息，
    system 消息始终保留。
    """

    id: str
    max_messages: Optional[int] = None
    messages: List[ChatMessage] = field(default_factory=list)
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @property
    def has_system_prompt(self) -> bool:
        return bool(self.messages) and self.messages[0].role == "system"

    def ensure_system_prompt(self, content: str) -> bool:
        """首次使用时插入 system 消息，返回本次是否插入。"""

        if self.has_system_prompt:
            return False
        self.messages.insert(0, ChatMessage(role="system", content=content))
        return True

    def add_user(self, content: str, **meta) -> ChatMessage:
        message = ChatMessage(role="user", content=content, meta=dict(meta))
        self.messages.append(message)
        self._evict()
        return message

    def history(self) -> List[ChatMessage]:
        return list(self.messages)

    def _evict(self) -> None:
        if not self.max_messages or len(self.messages) <= self.max_messages:
            return
        head = self.messages[:1] if self.has_system_prompt else []
        keep = max(self.max_messages - len(head), 1)
        self.messages = head + self.messages[len(self.messages) - keep:]


class ConversationStore(Protocol):
    def get_or_create(self, conversation_id: str) -> Conversation:
        ...

    def get(self, conversation_id: str) -> Optional[Conversation]:
        ...

    def delete(self, conversation_id: str) -> None:
        ...
