"""
Prompt templates and structured-output schemas.

Every builder here is plain string substitution over a fixed template. The
schemas use the JSON-schema subset the Gemini structured-output mode accepts.
"""

from typing import Dict, Iterable, List, Optional

PRACTICE_FEEDBACK_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overallSummary": {
            "type": "STRING",
            "description": "A brief, overall summary of the candidate's performance, highlighting strengths and key areas for improvement.",
        },
        "clarity": {
            "type": "STRING",
            "description": "Feedback on the clarity and conciseness of the user's responses.",
        },
        "relevance": {
            "type": "STRING",
            "description": "Feedback on how relevant the user's answers were to the questions asked.",
        },
        "problemSolving": {
            "type": "STRING",
            "description": "Feedback on the user's problem-solving skills and thought process, especially in technical scenarios.",
        },
    },
    "required": ["overallSummary", "clarity", "relevance", "problemSolving"],
}

PRACTICE_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "response": {
            "type": "STRING",
            "description": "The AI's full response, including emotional and pacing cues in brackets like [thoughtful] or [sighs]. If the session is over, this should be the final concluding remark before feedback.",
        },
        "isSessionComplete": {
            "type": "BOOLEAN",
            "description": "Set to true only if the conversation has reached a natural conclusion (e.g., after 10-12 exchanges) and it's time to provide feedback.",
        },
        "feedback": PRACTICE_FEEDBACK_SCHEMA,
    },
    "required": ["response", "isSessionComplete"],
}

FIRST_QUESTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {"question": {"type": "STRING"}},
    "required": ["question"],
}

FOLLOW_UP_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "followUpQuestion": {
            "type": "STRING",
            "description": "The next interview question, building on the candidate's last answer.",
        },
    },
    "required": ["followUpQuestion"],
}

INTERVIEW_FEEDBACK_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "communicationSkills": {
            "type": "STRING",
            "description": "Feedback on the candidate's communication skills, including clarity, conciseness, and active listening.",
        },
        "technicalKnowledge": {
            "type": "STRING",
            "description": "Feedback on the candidate's technical knowledge and expertise relevant to the job role.",
        },
        "areasForImprovement": {
            "type": "STRING",
            "description": "Specific areas where the candidate can improve their interview performance.",
        },
        "overallFeedback": {
            "type": "STRING",
            "description": "Overall summary of the candidate's interview performance",
        },
    },
    "required": ["communicationSkills", "technicalKnowledge", "areasForImprovement", "overallFeedback"],
}

EXPRESSIVE_TEXT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "expressiveText": {
            "type": "STRING",
            "description": "The text modified with expressive cues like [laugh] or [short pause].",
        },
    },
    "required": ["expressiveText"],
}

TRANSCRIPTION_INSTRUCTION = "Transcribe the audio."

RANDOM_TOPIC_INSTRUCTION = (
    "**Conversation Topic:** You MUST invent a creative, engaging, and random conversation starter. "
    "DO NOT always choose Mars. Be creative. For example: \"What if humans could photosynthesize?\", "
    "\"What's the most useless superpower you can think of?\", or \"Describe the perfect sandwich.\""
)

NEW_SESSION_INSTRUCTION = (
    "**This is a new session. Your task is to start the conversation based on the rules and scenario above.**"
)

PRACTICE_TEMPLATE = """You are a live role-playing partner. Your personality and goals are defined by the scenario. Your task is to have a natural, spoken conversation with the user.

**CRITICAL INSTRUCTIONS:**
1.  **Inject Expressive Cues:** Your spoken response MUST include a variety of expressive, non-speech markup tags in brackets to guide your speech synthesis. This is essential for sounding human.
    *   **Pauses:** Use [short pause], [medium pause], [long pause] to control pacing.
    *   **Vocalizations:** Use [sigh], [laughing], [uhm] for realistic reactions and hesitations.
    *   **Style:** Use [shouting], [whispering] for emphasis where appropriate.
    *   **Example:** "[uhm]... well, [short pause] that's an interesting way to look at it. [laughing] I hadn't considered that."
2.  **Conversation Arc & Conclusion:**
    *   **First Message:** If the chat history is empty, you MUST start with a brief, friendly introduction. Example: "Hi there, [short pause] thanks for coming in today. I'm Alex, and I'll be leading your interview. To start, [medium pause] could you tell me a little bit about yourself and what led you to apply for this role?"
    *   **Progression:** After the intro, ask progressively deeper questions based on the user's responses.
    *   **Determine Completion:** After about 10-12 exchanges, you MUST decide the interview is over. Set `isSessionComplete` to `true`.
    *   **Concluding Remark:** If the session is complete, your 'response' field should be a brief concluding remark. Example: "Alright, that was very insightful. [medium pause] I think I have everything I need for now. Thanks for your time."
    *   **Generate Final Feedback:** If `isSessionComplete` is true, you MUST provide a detailed, structured feedback object in the 'feedback' field. Evaluate the user's performance throughout the entire conversation.

**SCENARIO:**
---
{scenario_block}
---

**CONVERSATION HISTORY (for context):**
---
{history_block}
---

{latest_block}

Now, generate your 'response', determine if the session is complete, and provide feedback if it is.
"""

FIRST_QUESTION_TEMPLATE = (
    "Generate one creative and engaging opening interview question for a {job_role} position. "
    "The question should be designed to be a good ice-breaker but also relevant to the role."
)

FOLLOW_UP_TEMPLATE = """You are an experienced interviewer conducting a mock interview for the role of {job_role}.

Based on the candidate's answer to the previous question, ask one intelligent follow-up question.
The question may probe deeper into the answer, ask for a concrete example, or move on to a new
topic relevant to the role if the answer was complete. Do not repeat a question that has already
been asked. Keep the question concise and conversational.

Previous Question: {previous_question}
Candidate's Answer: {user_response}

Interview Transcript So Far:
{interview_transcript}
"""

FEEDBACK_TEMPLATE = """You are an experienced interview coach providing feedback on a mock interview.

  Analyze the following interview transcript in the context of the provided job description.
  Provide detailed feedback on the candidate's communication skills, technical knowledge, and areas for improvement.
  Also include an overall summary of the candidate's performance

  Job Description: {job_description}
  Interview Transcript: {interview_transcript}

  Format your response as follows:

  Communication Skills: [Your feedback on communication skills]
  Technical Knowledge: [Your feedback on technical knowledge]
  Areas for Improvement: [Specific areas for improvement]
  Overall feedback: [Overall summary of the candidate's interview performance]"""

EXPRESSIVE_TEXT_TEMPLATE = """Analyze the following text and rewrite it with expressive cues to make it sound more human and natural for a text-to-speech engine.

    The speaker is an AI interview coach. The tone should generally be professional but can be friendly, encouraging, or even show a bit of light pressure depending on the context.

    Use the following cues where appropriate:
    - [short pause], [medium pause], [long pause] for pacing.
    - [laughing] for lighthearted moments.
    - [uhm], [sigh] for natural hesitations.
    - [shouting], [whispering] for emphasis, but use these sparingly.
    - You can also add style instructions at the beginning, like "Speak in a friendly and encouraging tone."

    Original text: {text}

    Your task is to return only the modified text with the added cues."""


def format_history(chat_history: Iterable[Dict[str, str]]) -> str:
    """Render practice history as `role: content` lines, skipping empty turns."""
    lines = []
    for entry in chat_history:
        content = entry.get('content')
        if content:
            lines.append(f"{entry.get('role')}: {content}")
    return "\n".join(lines)


def format_transcript(messages) -> str:
    """Render interview messages (ChatMessage or dicts) as `role: text` lines."""
    lines = []
    for message in messages:
        if isinstance(message, dict):
            role, text = message.get('role'), message.get('text', '')
        else:
            role, text = message.role, message.text
        lines.append(f"{role}: {text}")
    return "\n".join(lines)


def build_practice_prompt(
    scenario: str,
    chat_history: List[Dict[str, str]],
    transcribed_user_text: Optional[str] = None,
    topic: Optional[str] = None,
    setting: Optional[str] = None,
    is_random_topic: bool = False,
) -> str:
    scenario_lines = [scenario]
    if is_random_topic:
        scenario_lines.append(RANDOM_TOPIC_INSTRUCTION)
    elif topic:
        scenario_lines.append(f"**Conversation Topic:** {topic}")
    if setting:
        scenario_lines.append(f"**Setting:** {setting}")

    if transcribed_user_text:
        latest_block = f"**LATEST USER RESPONSE (from transcription):**\nuser: {transcribed_user_text}"
    else:
        latest_block = NEW_SESSION_INSTRUCTION

    return PRACTICE_TEMPLATE.format(
        scenario_block="\n".join(scenario_lines),
        history_block=format_history(chat_history),
        latest_block=latest_block,
    )


def build_first_question_prompt(job_role: str) -> str:
    return FIRST_QUESTION_TEMPLATE.format(job_role=job_role)


def build_follow_up_prompt(job_role: str, previous_question: str, user_response: str,
                           interview_transcript: str) -> str:
    return FOLLOW_UP_TEMPLATE.format(
        job_role=job_role,
        previous_question=previous_question,
        user_response=user_response,
        interview_transcript=interview_transcript,
    )


def build_feedback_prompt(interview_transcript: str, job_description: str) -> str:
    return FEEDBACK_TEMPLATE.format(
        interview_transcript=interview_transcript,
        job_description=job_description,
    )


def build_expressive_text_prompt(text: str) -> str:
    return EXPRESSIVE_TEXT_TEMPLATE.format(text=text)
