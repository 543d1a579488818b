"""
Public API

Modules:
    session: SupportSession, the stateful chat entry point
    convenience: One-call helpers (converse, extract, create_session)
"""

from yammii_assist.api.convenience import converse, create_session, extract
from yammii_assist.api.session import SupportSession

__all__ = ["SupportSession", "converse", "create_session", "extract"]
