from flask import Blueprint, jsonify, current_app
import datetime

from interview_coach.api import get_services

health_bp = Blueprint('health', __name__)

@health_bp.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        "status": "healthy",
        "ai_configured": get_services().get('ai_client') is not None,
        "text_model": current_app.config.get('TEXT_MODEL'),
        "tts_model": current_app.config.get('TTS_MODEL'),
        "timestamp": datetime.datetime.now().isoformat()
    })
