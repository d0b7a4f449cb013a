from datetime import datetime
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from interview_coach.models import AI_ROLE, InterviewSession


def format_timestamp(value: Optional[int]) -> str:
    if value is None:
        return 'N/A'
    return datetime.fromtimestamp(value / 1000).strftime('%Y-%m-%d %H:%M')


def create_pdf_report(session: InterviewSession) -> BytesIO:
    """Render a finished (or abandoned) interview as a PDF."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter)
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=24,
        spaceAfter=30,
        alignment=TA_CENTER,
        textColor=colors.darkblue
    )

    subtitle_style = ParagraphStyle(
        'ReportSubtitle',
        parent=styles['Heading2'],
        fontSize=16,
        spaceAfter=20,
        textColor=colors.darkgreen
    )

    body_style = ParagraphStyle(
        'ReportBody',
        parent=styles['Normal'],
        fontSize=11,
        leading=14
    )

    content = [
        Paragraph("Mock Interview Report", title_style),
        Spacer(1, 0.25 * inch),
        Paragraph("Interview Details", subtitle_style),
    ]

    details = [
        ["Job Role:", session.job_role or 'N/A'],
        ["Interview ID:", session.id],
        ["Started:", format_timestamp(session.start_time)],
        ["Finished:", format_timestamp(session.end_time)],
        ["Questions Asked:", str(session.question_count)],
    ]
    details_table = Table(details, colWidths=[2 * inch, 4 * inch])
    details_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (0, -1), colors.lightgrey),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 11),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ('GRID', (0, 0), (-1, -1), 1, colors.black)
    ]))
    content.append(details_table)
    content.append(Spacer(1, 0.25 * inch))

    if session.messages:
        content.append(Paragraph("Interview Transcript", subtitle_style))
        for message in session.messages:
            speaker = "Interviewer" if message.role == AI_ROLE else "Candidate"
            content.append(Paragraph(f"<b>{speaker}:</b> {escape(message.text)}", body_style))
            content.append(Spacer(1, 0.1 * inch))
        content.append(Spacer(1, 0.25 * inch))

    content.append(Paragraph("Feedback", subtitle_style))
    if session.feedback:
        sections = [
            ("Communication Skills", session.feedback.communication_skills),
            ("Technical Knowledge", session.feedback.technical_knowledge),
            ("Areas for Improvement", session.feedback.areas_for_improvement),
            ("Overall Feedback", session.feedback.overall_feedback),
        ]
        for heading, text in sections:
            content.append(Paragraph(f"<b>{heading}:</b> {escape(text or 'N/A')}", body_style))
            content.append(Spacer(1, 0.15 * inch))
    else:
        content.append(Paragraph("Feedback not available.", body_style))

    doc.build(content)
    buffer.seek(0)
    return buffer
