import json
import re
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from interview_coach.core.errors import AIResponseError
from interview_coach.models import PracticeFeedback

logger = logging.getLogger(__name__)

# One or more adjacent bracketed cues plus the spaces around them; line breaks are kept
CUE_PATTERN = re.compile(r'(?: *\[[^\]]*\])+ *')


def _cue_replacement(match: re.Match) -> str:
    text = match.string
    start, end = match.span()
    at_line_start = start == 0 or text[start - 1] == '\n'
    at_line_end = end == len(text) or text[end] == '\n'
    return '' if at_line_start or at_line_end else ' '


def strip_cues(text: str) -> str:
    """Remove bracketed stage directions, leaving the text shown in the chat."""
    if not text:
        return ''
    return CUE_PATTERN.sub(_cue_replacement, text).strip()


def parse_json_response(response_text: Optional[str]) -> Dict[str, Any]:
    """Parse a structured model answer, tolerating markdown code fences."""
    if not response_text or not response_text.strip():
        raise AIResponseError("The AI model did not return a valid response.")

    text = response_text.strip()
    if "```" in text:
        match = re.search(r'```(?:json)?\s*(.*?)\s*```', text, re.DOTALL)
        if match:
            text = match.group(1).strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"LLM response is not valid JSON: {e}")
        raise AIResponseError("The AI model did not return a valid response.") from e

    if not isinstance(parsed, dict):
        raise AIResponseError("The AI model did not return a valid response.")
    return parsed


@dataclass
class PracticeReply:
    response: str
    is_session_complete: bool
    feedback: Optional[PracticeFeedback] = None


def parse_practice_response(payload: Dict[str, Any]) -> PracticeReply:
    response = payload.get('response')
    if not isinstance(response, str):
        raise AIResponseError("The AI model did not return a valid response.")

    feedback_data = payload.get('feedback')
    feedback = None
    if isinstance(feedback_data, dict) and feedback_data:
        feedback = PracticeFeedback.from_dict(feedback_data)

    return PracticeReply(
        response=response,
        is_session_complete=bool(payload.get('isSessionComplete', False)),
        feedback=feedback,
    )
