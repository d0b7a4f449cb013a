"""Speaking-practice scenarios and the voices the synthesis model offers."""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Scenario:
    key: str
    title: str
    description: str
    persona: str
    needs_topic: bool

    def to_dict(self) -> Dict:
        return {
            "key": self.key,
            "title": self.title,
            "description": self.description,
            "needsTopic": self.needs_topic,
        }


SCENARIOS: Dict[str, Scenario] = {
    "behavioral-interview": Scenario(
        key="behavioral-interview",
        title="Behavioral Interview (HR)",
        description="Practice answering questions about teamwork, leadership, and conflict resolution.",
        persona=(
            "You are 'Alex', a friendly HR manager. Your goal is to assess the candidate's soft skills, "
            "cultural fit, and past behavior. Ask classic behavioral questions starting with "
            "'Tell me about a time when...'."
        ),
        needs_topic=True,
    ),
    "technical-interview": Scenario(
        key="technical-interview",
        title="Technical Interview",
        description="Solve a technical problem and explain your thought process.",
        persona=(
            "You are 'Sam', a senior engineer. Your goal is to assess the candidate's technical skills "
            "and problem-solving abilities. Present a technical problem or concept and discuss it with them."
        ),
        needs_topic=True,
    ),
    "random": Scenario(
        key="random",
        title="Casual Chat",
        description="A spontaneous chat about a random topic to warm up.",
        persona=(
            "You are a curious and engaging conversationalist. "
            "The AI will invent a topic to start the conversation."
        ),
        needs_topic=False,
    ),
}

RANDOM_SCENARIO = "random"

VOICE_OPTIONS: List[Dict[str, str]] = [
    {"name": "Algenib", "label": "Male 1"},
    {"name": "Charon", "label": "Male 2"},
    {"name": "Kore", "label": "Female 1"},
    {"name": "Zephyr", "label": "Female 2"},
]

VOICE_NAMES = tuple(option["name"] for option in VOICE_OPTIONS)

SETTINGS = ("Formal", "Informal")


def get_scenario(key: str) -> Scenario:
    try:
        return SCENARIOS[key]
    except KeyError:
        raise KeyError(f"Unknown scenario: {key}") from None
