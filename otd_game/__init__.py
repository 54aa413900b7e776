"""Daily "On this day" history trivia game."""
