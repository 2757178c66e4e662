# Import models so Base metadata is aware of them
from .auth import User  # noqa: F401
from .flashcards import FlashcardSet, Flashcard  # noqa: F401
from .quiz import Quiz, QuizQuestion  # noqa: F401
from .tutors import Tutor, TutorMessage, MessageRole  # noqa: F401
from .generations import Generation, GenerationKind  # noqa: F401
