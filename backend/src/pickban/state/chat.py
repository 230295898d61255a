"""Chat conversations and their participants.

A conversation and its participant list always change together when a
room is created or deleted; both happen under one lock.
"""

import logging
import threading
from typing import Any, Optional

from pickban.models.chat import ChatPerson, Conversation, ConversationKind

logger = logging.getLogger(__name__)

JOINED_ROOM_BODY = "joined_room"


class ChatState:
    """Tracks champion select, post game and lobby conversations."""

    def __init__(self):
        self._lock = threading.Lock()
        self._conversations: dict[ConversationKind, Optional[Conversation]] = {
            kind: None for kind in ConversationKind
        }
        self._participants: dict[ConversationKind, Optional[tuple[int, ...]]] = {
            kind: None for kind in ConversationKind
        }
        self.me: Optional[ChatPerson] = None

    def conversation(self, kind: ConversationKind) -> Optional[Conversation]:
        return self._conversations[kind]

    def participants(self, kind: ConversationKind) -> Optional[tuple[int, ...]]:
        return self._participants[kind]

    def set_me(self, me: Optional[ChatPerson]) -> None:
        self.me = me

    def set_conversation(
        self,
        kind: ConversationKind,
        conversation: Optional[Conversation],
        participants: Optional[tuple[int, ...]] = None,
        reset_participants: bool = True,
    ) -> None:
        """Replace a conversation and, unless told not to, its participants."""
        with self._lock:
            self._conversations[kind] = conversation
            if reset_participants:
                self._participants[kind] = participants

    def _kind_of(self, conversation_id: str) -> Optional[ConversationKind]:
        for kind, conversation in self._conversations.items():
            if conversation is not None and conversation.id == conversation_id:
                return kind
        return None

    def apply_conversation_event(self, event_type: str, conversation_id: str, data: Any) -> None:
        """Apply a ``/lol-chat/v1/conversations/{id}`` event.

        Args:
            event_type: "Create", "Update" or "Delete"
            conversation_id: Id from the event URI
            data: Event payload (ignored for Delete)
        """
        if event_type == "Delete":
            kind = self._kind_of(conversation_id)
            if kind in (ConversationKind.CHAMPION_SELECT, ConversationKind.POST_GAME):
                self.set_conversation(kind, None, participants=None)
            return

        conversation = Conversation.from_lcu(data)
        if conversation is None:
            return

        try:
            kind = ConversationKind(conversation.type)
        except ValueError:
            return
        if kind == ConversationKind.LOBBY:
            return

        if event_type == "Create":
            self.set_conversation(kind, conversation, participants=())
        elif event_type == "Update":
            self.set_conversation(kind, conversation, reset_participants=False)

    def apply_message_event(self, conversation_id: str, data: Any) -> None:
        """Record a participant when a ``joined_room`` system message arrives."""
        if not isinstance(data, dict):
            return
        if data.get("type") != "system" or data.get("body") != JOINED_ROOM_BODY:
            return

        summoner_id = data.get("fromSummonerId")
        if not summoner_id:
            return

        with self._lock:
            kind = self._kind_of(conversation_id)
            if kind is None:
                return
            current = self._participants[kind] or ()
            if summoner_id not in current:
                self._participants[kind] = current + (summoner_id,)
                logger.debug(f"Summoner {summoner_id} joined {kind.value} conversation")
