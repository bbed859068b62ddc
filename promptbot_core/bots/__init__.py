"""Ready-made bots built on prompts and dialogs."""
from .age_prompt import AgePromptBot
from .simple_prompt import SimplePromptBot

__all__ = ["AgePromptBot", "SimplePromptBot"]
