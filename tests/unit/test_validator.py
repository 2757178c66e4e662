import copy

import pytest

from app.modules.flashcards import FlashcardGeneration
from app.modules.generation.errors import ValidationFailed
from app.modules.generation.models import ContentKind
from app.modules.generation.validator import validate
from app.modules.quiz.models import QuizGeneration
from tests.fixtures.sample_data import FLASHCARDS, QUIZ

pytestmark = pytest.mark.unit


def test_valid_flashcards():
    content = validate(FLASHCARDS, ContentKind.FLASHCARD_SET, choice_count=5)
    assert isinstance(content, FlashcardGeneration)
    assert [c.answer for c in content.flashcards] == ["ATP", "In chloroplasts"]


def test_missing_answer_rejects_whole_set():
    envelope = {"flashcards": [{"question": "Q1", "answer": "A1"}, {"question": "Q2"}]}
    with pytest.raises(ValidationFailed) as exc:
        validate(envelope, ContentKind.FLASHCARD_SET, choice_count=5)
    assert exc.value.location == "flashcards.1.answer"
    assert exc.value.status_code == 502


def test_blank_text_is_rejected():
    envelope = {"flashcards": [{"question": "   ", "answer": "A1"}]}
    with pytest.raises(ValidationFailed):
        validate(envelope, ContentKind.FLASHCARD_SET, choice_count=5)


def test_empty_list_is_rejected():
    with pytest.raises(ValidationFailed):
        validate({"flashcards": []}, ContentKind.FLASHCARD_SET, choice_count=5)


def test_wrong_envelope_key():
    with pytest.raises(ValidationFailed):
        validate({"cards": FLASHCARDS["flashcards"]}, ContentKind.FLASHCARD_SET, choice_count=5)


def test_valid_quiz():
    content = validate(QUIZ, ContentKind.QUIZ, choice_count=5)
    assert isinstance(content, QuizGeneration)
    assert content.questions[1].correct_answer == "Chlorophyll"


def test_quiz_with_too_few_choices():
    envelope = copy.deepcopy(QUIZ)
    envelope["questions"][0]["possibleAnswers"] = ["Mitochondria", "Nucleus"]
    with pytest.raises(ValidationFailed) as exc:
        validate(envelope, ContentKind.QUIZ, choice_count=5)
    assert exc.value.location == "questions.0.possibleAnswers"


def test_quiz_correct_answer_must_be_a_choice():
    envelope = copy.deepcopy(QUIZ)
    envelope["questions"][1]["correctAnswer"] = "Chlorophyl"
    with pytest.raises(ValidationFailed) as exc:
        validate(envelope, ContentKind.QUIZ, choice_count=5)
    assert exc.value.location == "questions.1.correctAnswer"


def test_chat_has_no_structured_content():
    with pytest.raises(ValueError):
        validate({}, ContentKind.CHAT, choice_count=5)
