"""Session API for QuizGenius."""
