from .flashcards import Flashcard, FlashcardGeneration

__all__ = [
    "Flashcard",
    "FlashcardGeneration",
]
