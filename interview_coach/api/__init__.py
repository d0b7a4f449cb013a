from flask import Flask, current_app

from interview_coach.core.async_runner import run_async_in_new_loop
from interview_coach.core.errors import AIServiceError

EXTENSION_KEY = 'interview_coach'


def register_routes(app: Flask):
    from .health import health_bp
    from .practice import practice_bp
    from .interviews import interviews_bp
    from .actions import actions_bp
    from .reports import reports_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(practice_bp)
    app.register_blueprint(interviews_bp)
    app.register_blueprint(actions_bp)
    app.register_blueprint(reports_bp)


def get_services() -> dict:
    return current_app.extensions[EXTENSION_KEY]


def require_ai():
    """Fail fast before building a coroutine when no AI client is configured."""
    if get_services().get('ai_client') is None:
        raise AIServiceError("AI service is not configured", operation="configure")


def run_ai(coro):
    return run_async_in_new_loop(coro, timeout=current_app.config.get('AI_TIMEOUT'))
