"""Chat models for the conversations tracked during a game flow."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ConversationKind(str, Enum):
    """Conversation types the client reports, by game flow stage."""

    CHAMPION_SELECT = "championSelect"
    POST_GAME = "postGame"
    LOBBY = "lobby"


@dataclass(frozen=True)
class Conversation:
    """A chat room."""

    id: str
    type: str
    name: str = ""

    @classmethod
    def from_lcu(cls, data: Any) -> Optional["Conversation"]:
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return cls(
            id=str(data["id"]),
            type=str(data.get("type") or ""),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class ChatPerson:
    """The local player's chat identity."""

    puuid: str
    summoner_id: int
    game_name: str = ""
    availability: str = ""

    @classmethod
    def from_lcu(cls, data: Any) -> Optional["ChatPerson"]:
        if not isinstance(data, dict):
            return None
        summoner_id = data.get("summonerId")
        return cls(
            puuid=str(data.get("puuid") or ""),
            summoner_id=summoner_id if isinstance(summoner_id, int) else 0,
            game_name=str(data.get("gameName") or ""),
            availability=str(data.get("availability") or ""),
        )
