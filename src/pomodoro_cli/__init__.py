"""Pomodoro CLI - a persistent focus/break interval timer for the terminal."""

__version__ = "0.1.0"
