import pytest

from app.modules.chat.models.chat import ChatRole, ChatTurn
from app.modules.generation.models import ContentKind, Difficulty, GenerationRequest
from app.modules.generation.prompts import (
    NO_WRAPPER_RULE,
    TUTOR_ACK,
    build_prompt,
    build_tutor_history,
)

pytestmark = pytest.mark.unit


def _request(kind):
    return GenerationRequest(
        kind=kind,
        source="The French Revolution began in 1789.",
        count=7,
        title="History",
        description="Revolutions",
        difficulty=Difficulty.HARD,
    )


def test_flashcard_prompt():
    prompt = build_prompt(_request(ContentKind.FLASHCARD_SET), choice_count=5)
    assert "7 cards" in prompt
    assert "hard difficulty" in prompt
    assert "The French Revolution began in 1789." in prompt
    assert '"flashcards"' in prompt
    assert prompt.endswith(NO_WRAPPER_RULE)


def test_quiz_prompt_states_choice_count():
    prompt = build_prompt(_request(ContentKind.QUIZ), choice_count=4)
    assert "7 questions" in prompt
    assert "4 possible answer choices" in prompt
    assert '"possibleAnswers"' in prompt and '"correctAnswer"' in prompt
    assert prompt.endswith(NO_WRAPPER_RULE)


def test_chat_has_no_single_shot_prompt():
    with pytest.raises(ValueError):
        build_prompt(_request(ContentKind.CHAT), choice_count=5)


def test_tutor_history_starts_with_preamble():
    turns = [
        ChatTurn(role=ChatRole.USER, content="When did it start?"),
        ChatTurn(role=ChatRole.ASSISTANT, content="In 1789."),
    ]
    history = build_tutor_history("The French Revolution began in 1789.", turns)
    assert len(history) == 4
    assert history[0].role == ChatRole.USER
    assert "The French Revolution began in 1789." in history[0].content
    assert history[1].role == ChatRole.ASSISTANT
    assert history[1].content == TUTOR_ACK
    assert history[2:] == turns


def test_tutor_history_without_turns():
    assert len(build_tutor_history("source")) == 2
