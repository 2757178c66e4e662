"""Flashcards module exports."""

from .models.flashcards import Flashcard, FlashcardGeneration

__all__ = [
    "Flashcard",
    "FlashcardGeneration",
]
