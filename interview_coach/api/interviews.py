from flask import Blueprint, request
import logging
import uuid

from interview_coach.api import get_services, require_ai, run_ai
from interview_coach.core.errors import SessionError
from interview_coach.core.response import APIResponse
from interview_coach.core.validation import InputValidator
from interview_coach.core.async_runner import run_async_in_new_loop

interviews_bp = Blueprint('interviews', __name__)
logger = logging.getLogger(__name__)


def _interview_service():
    return get_services()['interview_service']


@interviews_bp.route('/api/interviews', methods=['POST'])
def start_interview():
    """Start an interview for a job role, or resume one with a known id."""
    try:
        data = request.get_json(silent=True) or {}
        job_role = InputValidator.validate_job_role(data.get('jobRole'))
        interview_id = InputValidator.validate_interview_id(data.get('id') or str(uuid.uuid4()))
        require_ai()

        service = _interview_service()
        session = run_ai(service.start_interview(interview_id, job_role, speak=bool(data.get('speak'))))
        return APIResponse.success(
            data=service.session_payload(session),
            message="Interview started",
            status_code=201
        )
    except Exception as e:
        logger.error(f"Failed to start interview: {e}")
        return APIResponse.handle_exception(e)


@interviews_bp.route('/api/interviews/<interview_id>', methods=['GET'])
def get_interview(interview_id):
    try:
        InputValidator.validate_interview_id(interview_id)
        service = _interview_service()
        session = run_async_in_new_loop(service.load_session(interview_id))
        return APIResponse.success(data=service.session_payload(session))
    except SessionError:
        return APIResponse.not_found("Interview", interview_id)
    except Exception as e:
        return APIResponse.handle_exception(e)


@interviews_bp.route('/api/interviews/<interview_id>/answer', methods=['POST'])
def submit_answer(interview_id):
    try:
        InputValidator.validate_interview_id(interview_id)
        data = request.get_json(silent=True) or {}
        answer = InputValidator.validate_answer(data.get('answer'))
        require_ai()

        service = _interview_service()
        session = run_ai(service.submit_answer(interview_id, answer, speak=bool(data.get('speak'))))
        return APIResponse.success(data=service.session_payload(session))
    except Exception as e:
        logger.error(f"Failed to submit answer for interview {interview_id}: {e}")
        return APIResponse.handle_exception(e)


@interviews_bp.route('/api/interviews/<interview_id>/finish', methods=['POST'])
def finish_interview(interview_id):
    try:
        InputValidator.validate_interview_id(interview_id)
        require_ai()

        service = _interview_service()
        session = run_ai(service.finish_interview(interview_id))
        message = "Interview finished" if session.feedback else "Interview finished. Feedback not available."
        return APIResponse.success(data=service.session_payload(session), message=message)
    except Exception as e:
        logger.error(f"Failed to finish interview {interview_id}: {e}")
        return APIResponse.handle_exception(e)


@interviews_bp.route('/api/history', methods=['GET'])
def interview_history():
    """Past interviews, newest first."""
    try:
        summaries = run_async_in_new_loop(get_services()['session_service'].list_summaries())
        return APIResponse.success(data={'sessions': summaries, 'count': len(summaries)})
    except Exception as e:
        return APIResponse.handle_exception(e)
