from flask import Blueprint, send_file
import logging

from interview_coach.api import get_services
from interview_coach.core.async_runner import run_async_in_new_loop
from interview_coach.core.errors import SessionError, ValidationError
from interview_coach.core.response import APIResponse
from interview_coach.core.validation import InputValidator
from interview_coach.services.report_service import create_pdf_report

reports_bp = Blueprint('reports', __name__)
logger = logging.getLogger(__name__)


@reports_bp.route('/api/reports/<interview_id>', methods=['GET'])
def download_report(interview_id):
    """Download an interview report as PDF."""
    try:
        InputValidator.validate_interview_id(interview_id)
        session = run_async_in_new_loop(get_services()['session_service'].get_session(interview_id))
        if session is None:
            raise SessionError(f'Interview {interview_id} not found', interview_id)
        if not session.messages:
            raise ValidationError('Report not available - no interview data recorded')

        pdf_buffer = create_pdf_report(session)
        return send_file(
            pdf_buffer,
            as_attachment=True,
            download_name=f"interview_report_{interview_id}.pdf",
            mimetype='application/pdf'
        )
    except Exception as e:
        logger.error(f"Failed to generate report for {interview_id}: {e}")
        return APIResponse.handle_exception(e)
