# process-wide record of what was asked and generated
# the app owns one instance on app.state (or None when disabled / dropped);
# request handlers only ever append to it

from __future__ import annotations
from collections import deque
from typing import Any, Deque, Dict, List, Literal, Protocol, TypedDict
from uuid import uuid4
import asyncio
import time


def now_ms() -> int:
    return int(time.time() * 1000)


class Message(TypedDict):
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: int  # epoch milliseconds
    metadata: Dict[str, Any]


class MessageSink(Protocol):
    async def append_message(self, message: Message) -> None: ...


class ConversationState:
    def __init__(self, *, max_messages: int = 200) -> None:
        """
        self._messages: bounded history, oldest messages fall off once max_messages is reached
        self.last_updated: epoch ms of the latest append (or creation)
        """
        self.conversation_id = f"conv-{uuid4()}"
        self.started_at = now_ms()
        self.last_updated = self.started_at
        self._messages: Deque[Message] = deque(maxlen=max(1, max_messages))
        self._lock = asyncio.Lock()

    async def append_message(self, message: Message) -> None:
        async with self._lock:
            self._messages.append(message)
            self.last_updated = now_ms()

    async def messages(self) -> List[Message]:
        async with self._lock:
            return list(self._messages)

    async def snapshot(self) -> Dict[str, Any]:
        async with self._lock:
            return {
                "conversation_id": self.conversation_id,
                "started_at": self.started_at,
                "last_updated": self.last_updated,
                "messages": list(self._messages),
            }


async def record_exchange(
    sink: MessageSink,
    *,
    prompt: str,
    response: str,
    is_edit: bool,
    packages: List[str],
) -> None:
    """Append the user prompt and the assistant reply, in that order."""
    ts = now_ms()
    await sink.append_message({
        "id": f"msg-{ts}",
        "role": "user",
        "content": prompt,
        "timestamp": ts,
        "metadata": {
            "edit_type": "edit" if is_edit else "generate",
            "added_packages": list(packages),
        },
    })
    await sink.append_message({
        "id": f"msg-{ts + 1}",
        "role": "assistant",
        "content": response,
        "timestamp": now_ms(),
        "metadata": {"added_packages": list(packages)},
    })
