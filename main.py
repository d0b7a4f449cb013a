#!/usr/bin/env python3
import os
import sys
import logging
from pathlib import Path

from dotenv import load_dotenv

from interview_coach.core.logging import setup_logging

# Logging first so config warnings raised during import are captured
setup_logging()
logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = 'your_'


def check_environment() -> bool:
    """Load keys.env if present and make sure a Gemini key is set."""
    keys_env = Path(__file__).parent / 'keys.env'
    if keys_env.exists():
        load_dotenv(keys_env)
        logger.info(f"Loaded environment from {keys_env.name}")

    api_key = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY')
    if not api_key:
        logger.error("❌ GEMINI_API_KEY is not set; add it to keys.env or the environment")
        return False
    if api_key.startswith(PLACEHOLDER_PREFIX):
        logger.error("❌ GEMINI_API_KEY still holds the placeholder value")
        return False

    logger.info("✅ Gemini credentials found")
    return True


def resolve_bind_address():
    if os.getenv('FLASK_ENV', 'development').lower() == 'development':
        return '127.0.0.1', 5000, True
    return '0.0.0.0', int(os.getenv('PORT', 5000)), False


def main() -> int:
    logger.info("🎤 Starting AI Mock Interview Coach")

    if not check_environment():
        return 1

    from interview_coach import create_app

    try:
        app = create_app()
        host, port, debug = resolve_bind_address()
        logger.info(f"🌐 Serving the interview API on http://{host}:{port}/api ({'debug' if debug else 'production'})")
        app.run(host=host, port=port, debug=debug, threaded=True)
    except KeyboardInterrupt:
        logger.info("⏹️ Stopped by user")
    except Exception as e:
        logger.error(f"💥 Server failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
