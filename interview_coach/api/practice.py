from flask import Blueprint, request
import logging

from interview_coach.agent.conversation import TurnRequest
from interview_coach.agent.practice_session import PLAYBACK_ACTIONS
from interview_coach.agent.scenarios import SCENARIOS, SETTINGS, VOICE_OPTIONS
from interview_coach.api import get_services, require_ai, run_ai
from interview_coach.core.errors import ValidationError
from interview_coach.core.response import APIResponse
from interview_coach.core.validation import InputValidator

practice_bp = Blueprint('practice', __name__)
logger = logging.getLogger(__name__)


def _practice_service():
    return get_services()['practice_service']


def _action(data, allowed):
    action = (data or {}).get('action')
    if action not in allowed:
        raise ValidationError(f"Action must be one of: {', '.join(allowed)}", field="action")
    return action


@practice_bp.route('/api/practice/options', methods=['GET'])
def practice_options():
    """Scenarios, voices and settings offered on the setup screen."""
    return APIResponse.success(data={
        'scenarios': [scenario.to_dict() for scenario in SCENARIOS.values()],
        'voices': VOICE_OPTIONS,
        'settings': list(SETTINGS),
    })


@practice_bp.route('/api/practice/sessions', methods=['POST'])
def create_practice_session():
    try:
        config = InputValidator.validate_practice_config(request.get_json(silent=True) or {})
        require_ai()

        service = _practice_service()
        session = service.create_session(**config)
        try:
            turn = run_ai(service.start_session(session.id))
        except Exception:
            service.end_session(session.id)
            raise

        return APIResponse.success(
            data={'session': session.to_dict(), 'turn': turn.to_dict()},
            message="Practice session started",
            status_code=201
        )
    except Exception as e:
        logger.error(f"Failed to start practice session: {e}")
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/sessions/<session_id>', methods=['GET'])
def get_practice_session(session_id):
    try:
        InputValidator.validate_session_id(session_id)
        session = _practice_service().get_session(session_id)
        return APIResponse.success(data={'session': session.to_dict()})
    except Exception as e:
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/sessions/<session_id>/turn', methods=['POST'])
def practice_turn(session_id):
    """Send one recorded answer and receive the partner's reply or the final feedback."""
    try:
        InputValidator.validate_session_id(session_id)
        data = request.get_json(silent=True) or {}
        user_audio = InputValidator.validate_audio_data_uri(data.get('userAudio'))
        require_ai()

        service = _practice_service()
        turn = run_ai(service.send_audio(session_id, user_audio))
        session = service.get_session(session_id)

        return APIResponse.success(data={'session': session.to_dict(), 'turn': turn.to_dict()})
    except Exception as e:
        logger.error(f"Practice turn failed for {session_id}: {e}")
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/sessions/<session_id>/listen', methods=['POST'])
def practice_listen(session_id):
    try:
        InputValidator.validate_session_id(session_id)
        action = _action(request.get_json(silent=True), ('start', 'stop'))
        session = _practice_service().get_session(session_id)
        if action == 'start':
            session.start_listening()
        else:
            session.stop_listening()
        return APIResponse.success(data={'session': session.to_dict()})
    except Exception as e:
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/sessions/<session_id>/interrupt', methods=['POST'])
def practice_interrupt(session_id):
    try:
        InputValidator.validate_session_id(session_id)
        session = _practice_service().get_session(session_id)
        session.interrupt()
        return APIResponse.success(data={'session': session.to_dict()})
    except Exception as e:
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/sessions/<session_id>/playback', methods=['POST'])
def practice_playback(session_id):
    try:
        InputValidator.validate_session_id(session_id)
        action = _action(request.get_json(silent=True), PLAYBACK_ACTIONS)
        session = _practice_service().get_session(session_id)
        session.playback(action)
        return APIResponse.success(data={'session': session.to_dict()})
    except Exception as e:
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/sessions/<session_id>', methods=['DELETE'])
def end_practice_session(session_id):
    try:
        InputValidator.validate_session_id(session_id)
        session = _practice_service().end_session(session_id)
        return APIResponse.success(data={'session': session.to_dict()}, message="Practice session ended")
    except Exception as e:
        return APIResponse.handle_exception(e)


@practice_bp.route('/api/practice/respond', methods=['POST'])
def practice_respond():
    """Stateless turn: the caller supplies scenario, history and audio."""
    try:
        validated = InputValidator.validate_practice_request(request.get_json(silent=True) or {})
        require_ai()

        turn = run_ai(_practice_service().respond(TurnRequest.from_validated(validated)))
        return APIResponse.success(data=turn.to_dict())
    except Exception as e:
        logger.error(f"Practice respond failed: {e}")
        return APIResponse.handle_exception(e)
