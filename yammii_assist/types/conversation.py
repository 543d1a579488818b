"""
Conversation Types

A chat transcript is an ordered list of turns. Order is meaningful: the
last turn is the message currently being answered.

Models:
    - ConversationTurn: One immutable chat message from the user or the model
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "model"]


class ConversationTurn(BaseModel):
    """
    A single message in the support chat.

    Attributes:
        role: "user" for the person asking, "model" for assistant replies
        text: Message text as displayed

    Turns are frozen. Callers append new turns to the transcript and never
    edit existing ones.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str

    @classmethod
    def from_user(cls, text: str) -> "ConversationTurn":
        return cls(role="user", text=text)

    @classmethod
    def from_model(cls, text: str) -> "ConversationTurn":
        return cls(role="model", text=text)
