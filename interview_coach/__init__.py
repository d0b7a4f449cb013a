from flask import Flask
from flask_cors import CORS
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load environment variables from keys.env, then .env
load_dotenv(dotenv_path=Path(__file__).parent.parent / 'keys.env')
load_dotenv()

from interview_coach.core.config import Config
from interview_coach.core.logging import setup_logging

logger = logging.getLogger(__name__)


def build_services(config: Config, ai_client=None) -> dict:
    """Wire the AI client, stores and flow services for one app instance."""
    from interview_coach.agent.conversation import ConversationEngine
    from interview_coach.services.gemini_client import create_gemini_client
    from interview_coach.services.interview_service import InterviewService
    from interview_coach.services.practice_service import PracticeService
    from interview_coach.services.session_service import InterviewSessionService
    from interview_coach.services.storage import LocalStorage

    if ai_client is None and config.GEMINI_API_KEY:
        ai_client = create_gemini_client(config)
    if ai_client is None:
        logger.error("No AI client configured - interview endpoints will answer with an AI service error")

    session_service = InterviewSessionService(LocalStorage(config.STORAGE_DIR), key=config.HISTORY_KEY)
    return {
        'ai_client': ai_client,
        'session_service': session_service,
        'interview_service': InterviewService(
            ai_client,
            session_service,
            max_questions=config.MAX_QUESTIONS,
            default_voice=config.DEFAULT_VOICE,
        ),
        'practice_service': PracticeService(ConversationEngine(ai_client)),
    }


def create_app(config: Config = None, ai_client=None):
    """Application factory for Flask app."""
    setup_logging()

    app = Flask(__name__)

    config = config or Config()
    app.config.from_object(config)

    CORS(app, resources={r"/api/*": {"origins": config.CORS_ORIGINS}})

    app.extensions['interview_coach'] = build_services(config, ai_client)

    from interview_coach.api import register_routes
    register_routes(app)

    @app.errorhandler(404)
    def not_found(error):
        return {"success": False, "error": "Endpoint not found", "type": "not_found", "status_code": 404}, 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return {"success": False, "error": "Internal server error", "type": "internal_error", "status_code": 500}, 500

    return app
