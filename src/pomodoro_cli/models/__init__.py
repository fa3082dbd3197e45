"""Pomodoro CLI domain models.

``config_models`` holds the pydantic configuration; ``timer`` holds the
session state machine and its collaborators.
"""
