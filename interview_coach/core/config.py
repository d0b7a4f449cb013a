import os
import logging

logger = logging.getLogger(__name__)


class Config:
    """Application configuration management."""

    def __init__(self):
        """Initialize configuration with validation."""
        self._load_config()
        self.validate()

    def _load_config(self):
        """Load configuration from environment variables."""
        # Flask settings
        self.SECRET_KEY = os.getenv('SECRET_KEY')
        if not self.SECRET_KEY:
            import secrets
            self.SECRET_KEY = secrets.token_hex(32)
        self.FLASK_ENV = os.getenv('FLASK_ENV', 'development')
        self.DEBUG = self.FLASK_ENV == 'development'

        # Gemini settings
        self.GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY')
        self.TEXT_MODEL = os.getenv('TEXT_MODEL', 'gemini-2.5-flash')
        self.TTS_MODEL = os.getenv('TTS_MODEL', 'gemini-2.5-flash-preview-tts')
        self.DEFAULT_VOICE = os.getenv('DEFAULT_VOICE', 'Algenib')
        self.AI_TIMEOUT = float(os.getenv('AI_TIMEOUT', '60'))

        # Storage settings
        self.STORAGE_DIR = os.getenv('STORAGE_DIR', 'storage')
        self.HISTORY_KEY = os.getenv('HISTORY_KEY', 'interviewHistory')

        # Interview settings
        self.MAX_QUESTIONS = int(os.getenv('MAX_QUESTIONS', '5'))

        # CORS settings
        self.CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5000').split(',')
        if self.FLASK_ENV == 'production':
            self.CORS_ORIGINS = os.getenv('CORS_ORIGINS_PROD', 'https://yourdomain.com').split(',')

    def validate(self) -> bool:
        """Validate required configuration with logging."""
        required = [
            ('GEMINI_API_KEY', self.GEMINI_API_KEY),
        ]

        missing = [name for name, value in required if not value]
        if missing:
            logger.error(f"Missing required configuration: {', '.join(missing)}")
            return False

        if self.MAX_QUESTIONS < 1:
            logger.warning(f"MAX_QUESTIONS={self.MAX_QUESTIONS} is below 1, interviews will finish after the first answer")

        return True
