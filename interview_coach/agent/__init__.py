"""
Interview Agent Module

Conversation components for speaking practice:
- Prompt assembly and response parsing
- Audio conversion
- Turn sequencing and session phases
"""

from .interview_state import InterviewState, SessionPhase
from .conversation import ConversationEngine, TurnRequest, TurnResult
from .practice_session import PracticeSession

__all__ = [
    'InterviewState',
    'SessionPhase',
    'ConversationEngine',
    'TurnRequest',
    'TurnResult',
    'PracticeSession'
]
