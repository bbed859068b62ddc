"""
Prompt Bot Framework
====================

Core modules for building turn-based conversational bots.

This package provides:
- Activity schema and turn handling
- Per-conversation state storage
- Recognizing prompts with caller-supplied validation
- Dialog stack orchestration
- Language generation resolution
- HTTP hosting endpoints
"""

__version__ = "1.0.0"
