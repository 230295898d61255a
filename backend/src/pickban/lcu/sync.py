"""Feeds client events into the session context and chat state."""

import logging
from typing import Any, Callable, Optional

import httpx

from pickban.lcu.client import LcuClient, LcuRequestError
from pickban.models.champ_select import Session
from pickban.models.chat import ChatPerson
from pickban.state.chat import ChatState
from pickban.state.session_context import SessionContext
from pickban.utils.errors import format_error

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (httpx.HTTPError, LcuRequestError)


def is_self_acting_now(session: Session) -> bool:
    """Whether the local seat has an action in progress."""
    return any(
        a.actor_cell_id == session.local_player_cell_id and a.is_in_progress and not a.completed
        for a in session.iter_actions()
    )


class LcuStateSync:
    """Applies champion select and chat events as they arrive.

    Listeners registered with ``on_change`` run after every session update,
    which is how decisions get re-evaluated.
    """

    def __init__(
        self,
        client: LcuClient,
        context: SessionContext,
        chat: Optional[ChatState] = None,
    ):
        self.client = client
        self.context = context
        self.chat = chat or ChatState()
        self._listeners: list[Callable[[], None]] = []

    def on_change(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def load_identity(self) -> Optional[str]:
        """Fetch the current summoner's puuid into the context."""
        try:
            summoner = self.client.get_current_summoner()
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Failed to load current summoner {format_error(e)}")
            return None

        puuid = summoner.get("puuid") if isinstance(summoner, dict) else None
        if puuid:
            self.context.update(puuid=puuid)
        return puuid

    def load_chat_me(self) -> None:
        try:
            self.chat.set_me(ChatPerson.from_lcu(self.client.get_chat_me()))
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Failed to load chat state {format_error(e)}")

    def _fetch_permissions(self) -> Optional[tuple[list[int], list[int]]]:
        try:
            return (
                self.client.get_pickable_champion_ids(),
                self.client.get_bannable_champion_ids(),
            )
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Failed to refresh pickable/bannable champions {format_error(e)}")
            return None

    def on_session_event(self, event_type: str, data: Any) -> None:
        """Apply a ``/lol-champ-select/v1/session`` event."""
        if event_type == "Delete":
            self.context.clear_session()
            self._notify()
            return

        session = Session.from_lcu(data)
        if session is None:
            logger.debug(f"Ignoring malformed champ select payload: {type(data).__name__}")
            return

        changes: dict[str, Any] = {
            "session": session,
            "is_acting_now": is_self_acting_now(session),
        }
        permissions = self._fetch_permissions()
        if permissions is not None:
            changes["current_pickables"], changes["current_bannables"] = permissions

        self.context.update(**changes)
        self._notify()

    def poll_session(self) -> None:
        """Pull the session once, for when no event stream is available."""
        try:
            data = self.client.get_champ_select_session()
        except httpx.HTTPStatusError as e:
            # 404 means we are not in champion select
            if e.response.status_code == 404:
                if self.context.session is not None:
                    self.on_session_event("Delete", None)
                return
            logger.warning(f"Failed to poll champ select session {format_error(e)}")
            return
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Failed to poll champ select session {format_error(e)}")
            return
        self.on_session_event("Update", data)

    def on_conversation_event(self, event_type: str, conversation_id: str, data: Any) -> None:
        self.chat.apply_conversation_event(event_type, conversation_id, data)

    def on_message_event(self, conversation_id: str, data: Any) -> None:
        self.chat.apply_message_event(conversation_id, data)

    def on_chat_me_event(self, event_type: str, data: Any) -> None:
        if event_type in ("Create", "Update"):
            self.chat.set_me(ChatPerson.from_lcu(data))
        else:
            self.chat.set_me(None)
