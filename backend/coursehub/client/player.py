"""Video player screen and the chat widget beside it."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from coursehub.client.api import ApiError, NotFoundError
from coursehub.client.screens import Screen

logger = logging.getLogger(__name__)

GREETING = (
    'Hi! I\'m your AI learning assistant for "{title}". Ask me anything about this '
    "video, and I'll help you understand the concepts better!"
)
EMPTY_REPLY_FALLBACK = (
    "I apologize, but I couldn't process your question right now. Please try again."
)
CONNECTION_ERROR = (
    "Sorry, I'm having trouble connecting right now. Please check your internet "
    "connection and try again."
)


@dataclass
class ChatMessage:
    content: str
    role: str  # "user" | "assistant"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ChatWidget:
    """In-memory transcript plus the idle/sending state machine.

    Nothing is persisted; dropping the widget drops the conversation.
    """

    HISTORY_LIMIT = 10

    def __init__(self, client, course_id: str, video_title: str):
        self.client = client
        self.course_id = course_id
        self.video_title = video_title
        self.messages: list[ChatMessage] = [
            ChatMessage(content=GREETING.format(title=video_title), role="assistant")
        ]
        self.input = ""
        self.sending = False

    @property
    def state(self) -> str:
        return "sending" if self.sending else "idle"

    @property
    def can_send(self) -> bool:
        return bool(self.input.strip()) and not self.sending

    async def send(self, text: Optional[str] = None) -> Optional[ChatMessage]:
        """Send one turn and return the assistant message that was appended.

        Returns None (and appends nothing) for blank input or while a send is
        outstanding.
        """
        content = (self.input if text is None else text).strip()
        if not content or self.sending:
            return None

        history = [{"role": m.role, "content": m.content} for m in self.messages[-self.HISTORY_LIMIT:]]
        self.messages.append(ChatMessage(content=content, role="user"))
        self.input = ""
        self.sending = True
        try:
            data = await self.client.chat(
                message=content,
                course_id=self.course_id,
                video_title=self.video_title,
                conversation_history=history,
            )
            reply = (data or {}).get("response") or EMPTY_REPLY_FALLBACK
        except ApiError as e:
            logger.warning("Chat error: %s", e.detail)
            reply = CONNECTION_ERROR
        finally:
            self.sending = False

        message = ChatMessage(content=reply, role="assistant")
        self.messages.append(message)
        return message


class VideoPlayerScreen(Screen):
    """Loads one course; ``state`` is loading, ready, not_found or error."""

    def __init__(self, client, course_id: str):
        super().__init__(client)
        self.course_id = course_id
        self.state = "loading"
        self.course: Optional[dict] = None
        self.chat: Optional[ChatWidget] = None

    async def load(self) -> str:
        try:
            self.course = await self.client.get_course(self.course_id)
        except NotFoundError:
            self.state = "not_found"
            return self.state
        except ApiError as e:
            logger.error("Error loading course %s: %s", self.course_id, e.detail)
            self.notify("error", e.detail)
            self.state = "error"
            return self.state

        self.chat = ChatWidget(self.client, self.course["id"], self.course["title"])
        self.state = "ready"
        return self.state

    @property
    def video_id(self) -> Optional[str]:
        return self.course.get("video_id") if self.course else None

    @property
    def embed_url(self) -> Optional[str]:
        return self.course.get("embed_url") if self.course else None

    @property
    def shows_placeholder(self) -> bool:
        """True when the stored URL has no recognisable video id."""
        return self.state == "ready" and self.video_id is None
