"""Data models for champion select automation."""

from pickban.models.champ_select import Action, ActionType, Bans, Session, TeamMember
from pickban.models.auto_select import (
    ActionRef,
    AutoSelectSettings,
    HighIdChampionPolicy,
    PendingGrab,
    SelfActionContext,
    UpcomingAction,
)
from pickban.models.chat import ChatPerson, Conversation, ConversationKind

__all__ = [
    "Action",
    "ActionType",
    "Bans",
    "Session",
    "TeamMember",
    "ActionRef",
    "AutoSelectSettings",
    "HighIdChampionPolicy",
    "PendingGrab",
    "SelfActionContext",
    "UpcomingAction",
    "ChatPerson",
    "Conversation",
    "ConversationKind",
]
