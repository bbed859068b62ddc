"""Scripted conversation testing against an in-memory channel."""
from .adapter import ReplyAssertion, TestAdapter, TestFlow

__all__ = ["ReplyAssertion", "TestAdapter", "TestFlow"]
