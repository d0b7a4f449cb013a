"""
Value records shared by the interview flows.

Records serialize to the camelCase JSON layout the history store keeps, so a
session written out and read back compares equal field for field.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

AI_ROLE = 'ai'
USER_ROLE = 'user'
ASSISTANT_ROLE = 'assistant'

MESSAGE_ROLES = (AI_ROLE, USER_ROLE, ASSISTANT_ROLE)


@dataclass
class ChatMessage:
    role: str
    text: str
    audio_url: Optional[str] = None

    def __post_init__(self):
        if self.role not in MESSAGE_ROLES:
            raise ValueError(f"Unknown message role: {self.role}")

    def to_dict(self) -> Dict[str, Any]:
        data = {'role': self.role, 'text': self.text}
        if self.audio_url is not None:
            data['audioUrl'] = self.audio_url
        return data

    def to_history_entry(self) -> Dict[str, str]:
        """Speaking practice history uses `content` instead of `text`."""
        return {'role': self.role, 'content': self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatMessage':
        text = data.get('text')
        if text is None:
            text = data.get('content', '')
        return cls(role=data['role'], text=text, audio_url=data.get('audioUrl'))


@dataclass
class InterviewFeedback:
    communication_skills: str
    technical_knowledge: str
    areas_for_improvement: str
    overall_feedback: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'communicationSkills': self.communication_skills,
            'technicalKnowledge': self.technical_knowledge,
            'areasForImprovement': self.areas_for_improvement,
            'overallFeedback': self.overall_feedback,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InterviewFeedback':
        return cls(
            communication_skills=data.get('communicationSkills', ''),
            technical_knowledge=data.get('technicalKnowledge', ''),
            areas_for_improvement=data.get('areasForImprovement', ''),
            overall_feedback=data.get('overallFeedback', ''),
        )


@dataclass
class PracticeFeedback:
    overall_summary: str
    clarity: str
    relevance: str
    problem_solving: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'overallSummary': self.overall_summary,
            'clarity': self.clarity,
            'relevance': self.relevance,
            'problemSolving': self.problem_solving,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PracticeFeedback':
        return cls(
            overall_summary=data.get('overallSummary', ''),
            clarity=data.get('clarity', ''),
            relevance=data.get('relevance', ''),
            problem_solving=data.get('problemSolving', ''),
        )


@dataclass
class InterviewSession:
    id: str
    job_role: str
    messages: List[ChatMessage] = field(default_factory=list)
    start_time: int = 0
    end_time: Optional[int] = None
    feedback: Optional[InterviewFeedback] = None

    @property
    def question_count(self) -> int:
        return sum(1 for message in self.messages if message.role == AI_ROLE)

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'jobRole': self.job_role,
            'messages': [message.to_dict() for message in self.messages],
            'startTime': self.start_time,
        }
        if self.end_time is not None:
            data['endTime'] = self.end_time
        if self.feedback is not None:
            data['feedback'] = self.feedback.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InterviewSession':
        feedback = data.get('feedback')
        return cls(
            id=data['id'],
            job_role=data.get('jobRole', ''),
            messages=[ChatMessage.from_dict(m) for m in data.get('messages', [])],
            start_time=data.get('startTime', 0),
            end_time=data.get('endTime'),
            feedback=InterviewFeedback.from_dict(feedback) if feedback else None,
        )
