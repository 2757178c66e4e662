import random
from collections import Counter

import pytest

from app.modules.generation.models import ContentKind
from app.modules.generation.validator import validate
from app.modules.quiz.shuffler import shuffle_answers, shuffle_quiz
from tests.fixtures.sample_data import QUIZ

pytestmark = pytest.mark.unit


def test_shuffle_keeps_the_same_choices():
    choices = ["a", "b", "c", "d", "e"]
    shuffle_answers(choices, random.Random(3))
    assert sorted(choices) == ["a", "b", "c", "d", "e"]


def test_shuffle_is_deterministic_for_a_seed():
    first, second = list("abcde"), list("abcde")
    shuffle_answers(first, random.Random(42))
    shuffle_answers(second, random.Random(42))
    assert first == second


def test_shuffle_handles_short_lists():
    empty, single = [], ["only"]
    shuffle_answers(empty, random.Random(0))
    shuffle_answers(single, random.Random(0))
    assert empty == [] and single == ["only"]


def test_every_permutation_is_about_equally_likely():
    rng = random.Random(1234)
    counts = Counter()
    trials = 6000
    for _ in range(trials):
        choices = ["a", "b", "c"]
        shuffle_answers(choices, rng)
        counts[tuple(choices)] += 1
    assert len(counts) == 6
    for n in counts.values():
        assert abs(n - trials / 6) < 150


def test_correct_answer_survives_quiz_shuffle():
    quiz = validate(QUIZ, ContentKind.QUIZ, choice_count=5)
    before = [sorted(q.possible_answers) for q in quiz.questions]
    shuffle_quiz(quiz, random.Random(9))
    assert [sorted(q.possible_answers) for q in quiz.questions] == before
    for q in quiz.questions:
        assert q.correct_answer in q.possible_answers


def test_correct_answer_position_is_not_favored():
    rng = random.Random(99)
    positions = Counter()
    trials = 5000
    for _ in range(trials):
        choices = ["right", "w1", "w2", "w3", "w4"]
        shuffle_answers(choices, rng)
        positions[choices.index("right")] += 1
    assert sorted(positions) == [0, 1, 2, 3, 4]
    for n in positions.values():
        assert abs(n - trials / 5) < 150
