from threading import Lock
from typing import Dict, Optional

from order_agent.config.settings import settings
from order_agent.domain.conversation import Conversation, ConversationStore


class InMemoryConversationStore(ConversationStore):
    """按 session id 保存意图抽取会话，生命周期与进程相同。"""

    def __init__(self, max_messages: Optional[int] = None):
        self._max_messages = max_messages or settings.max_context_messages
        self._conversations: Dict[str, Conversation] = {}
        self._guard = Lock()

    def get_or_create(self, conversation_id: str) -> Conversation:
        with self._guard:
            conv = self._conversations.get(conversation_id)
            if conv is None:
                conv = Conversation(id=conversation_id, max_messages=self._max_messages)
                self._conversations[conversation_id] = conv
            return conv

    def get(self, conversation_id: str) -> Optional[Conversation]:
        return self._conversations.get(conversation_id)

    def delete(self, conversation_id: str) -> None:
        with self._guard:
            self._conversations.pop(conversation_id, None)
