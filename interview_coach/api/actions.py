from flask import Blueprint, request
import logging

from interview_coach.api import get_services, require_ai, run_ai
from interview_coach.core.response import APIResponse
from interview_coach.core.validation import InputValidator

actions_bp = Blueprint('actions', __name__)
logger = logging.getLogger(__name__)


def _action_response(result):
    """Action results carry their own success flag and user-facing error."""
    if result.get('success'):
        data = {key: value for key, value in result.items() if key != 'success'}
        return APIResponse.success(data=data)
    return APIResponse.error(result.get('error'), error_type="ai_service_error", status_code=502)


@actions_bp.route('/api/actions/first-question', methods=['POST'])
def first_question():
    try:
        data = request.get_json(silent=True) or {}
        job_role = InputValidator.validate_job_role(data.get('jobRole'))
        require_ai()
        return _action_response(run_ai(get_services()['interview_service'].generate_first_question(job_role)))
    except Exception as e:
        return APIResponse.handle_exception(e)


@actions_bp.route('/api/actions/follow-up', methods=['POST'])
def follow_up():
    try:
        data = request.get_json(silent=True) or {}
        job_role = InputValidator.validate_job_role(data.get('jobRole'))
        previous_question = InputValidator.validate_text(data.get('previousQuestion'), 'previousQuestion')
        user_response = InputValidator.validate_text(data.get('userResponse'), 'userResponse')
        transcript = data.get('interviewTranscript') or ''
        if not isinstance(transcript, str):
            transcript = ''
        require_ai()

        result = run_ai(get_services()['interview_service'].generate_follow_up(
            job_role, previous_question, user_response, transcript
        ))
        return _action_response(result)
    except Exception as e:
        return APIResponse.handle_exception(e)


@actions_bp.route('/api/actions/feedback', methods=['POST'])
def feedback():
    try:
        data = request.get_json(silent=True) or {}
        transcript = InputValidator.validate_text(data.get('interviewTranscript'), 'interviewTranscript')
        job_description = InputValidator.validate_text(data.get('jobDescription'), 'jobDescription')
        require_ai()
        return _action_response(run_ai(get_services()['interview_service'].get_feedback(transcript, job_description)))
    except Exception as e:
        return APIResponse.handle_exception(e)


@actions_bp.route('/api/audio', methods=['POST'])
def expressive_audio():
    """Speak text after an expressive rewrite with pacing cues."""
    try:
        text = InputValidator.validate_text((request.get_json(silent=True) or {}).get('text'))
        require_ai()
        return _action_response(run_ai(get_services()['interview_service'].get_audio(text)))
    except Exception as e:
        logger.error(f"Audio generation failed: {e}")
        return APIResponse.handle_exception(e)


@actions_bp.route('/api/audio/plain', methods=['POST'])
def plain_audio():
    try:
        text = InputValidator.validate_text((request.get_json(silent=True) or {}).get('text'))
        require_ai()
        return _action_response(run_ai(get_services()['interview_service'].voice_interaction(text)))
    except Exception as e:
        logger.error(f"Audio generation failed: {e}")
        return APIResponse.handle_exception(e)
