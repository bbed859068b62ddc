"""
Unit Tests for the Bundled Bots

Tests for SimplePromptBot and AgePromptBot conversations.
"""

import pytest

from promptbot_core.bots import AgePromptBot, SimplePromptBot
from promptbot_core.generation import TemplateResolver
from promptbot_core.prompts import RecognitionStatus
from promptbot_core.schema import ActivityTypes
from promptbot_core.testing import TestFlow


class TestSimplePromptBot:
    """Tests for SimplePromptBot."""

    @pytest.mark.asyncio
    async def test_name_flow(self, adapter, conversation_state):
        """Test asking for a name and welcoming the user."""
        bot = SimplePromptBot(conversation_state, TemplateResolver())

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hi", "Please enter your name.")
            .test("Ada", "Welcome! Thank you, I have your name as 'Ada'.")
            .test("hello again", "Please enter your name.")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_custom_template(self, adapter, conversation_state):
        """Test that the welcome text comes from the resolver."""
        bot = SimplePromptBot(conversation_state, TemplateResolver({"welcomeUser": "Hi {name}!"}))

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hi", "Please enter your name.")
            .test("Ada", "Hi Ada! Thank you, I have your name as 'Ada'.")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_name_with_template_syntax(self, adapter, conversation_state):
        """Test that bracketed user text is echoed, not resolved as a template."""
        bot = SimplePromptBot(conversation_state, TemplateResolver())

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hi", "Please enter your name.")
            .test("[admin]", "Welcome! Thank you, I have your name as '[admin]'.")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_name_with_placeholder_syntax(self, adapter, conversation_state):
        """Test that a name containing an entity placeholder is kept verbatim."""
        bot = SimplePromptBot(conversation_state, TemplateResolver({"welcomeUser": "Hi {name}!"}))

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hi", "Please enter your name.")
            .test("{name}", "Hi {name}! Thank you, I have your name as '{name}'.")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_blank_name_reprompts(self, adapter, conversation_state):
        """Test that a blank reply repeats the prompt."""
        bot = SimplePromptBot(conversation_state, TemplateResolver())

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hi", "Please enter your name.")
            .test(" ", "Please enter your name.")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_non_message_ignored(self, adapter, conversation_state, storage):
        """Test that conversation updates produce no reply and no state."""
        bot = SimplePromptBot(conversation_state, TemplateResolver())

        await (
            TestFlow(adapter, bot.on_turn)
            .send(adapter.make_activity(activity_type=ActivityTypes.CONVERSATION_UPDATE))
            .assert_no_reply()
            .start_test()
        )

        assert len(storage) == 0

    def test_requires_collaborators(self, conversation_state):
        """Test constructor validation."""
        with pytest.raises(TypeError):
            SimplePromptBot(conversation_state, None)
        with pytest.raises(TypeError):
            SimplePromptBot(None, TemplateResolver())


class TestAgePromptBot:
    """Tests for AgePromptBot."""

    @pytest.mark.asyncio
    async def test_age_flow(self, adapter, conversation_state, recognizer):
        """Test prompting, rejection and acceptance."""
        bot = AgePromptBot(conversation_state, recognizer=recognizer, min_age=1, max_age=120)

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hello", "How old are you?")
            .test("test test test", RecognitionStatus.NOT_RECOGNIZED)
            .test("0 years", RecognitionStatus.TOO_SMALL)
            .test("200 years", RecognitionStatus.TOO_BIG)
            .test("I am 30 years old", "30 Year")
            .test("hello", "How old are you?")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_no_limits(self, adapter, conversation_state, recognizer):
        """Test that any recognized age is accepted without limits."""
        bot = AgePromptBot(conversation_state, recognizer=recognizer)

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hello", "How old are you?")
            .test("six months", "6 Month")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_large_value_reply(self, adapter, conversation_state, recognizer):
        """Test that large ages are echoed with every digit."""
        bot = AgePromptBot(conversation_state, recognizer=recognizer)

        await (
            TestFlow(adapter, bot.on_turn)
            .test("hello", "How old are you?")
            .test("1234567 days", "1234567 Day")
            .start_test()
        )

    @pytest.mark.asyncio
    async def test_non_message_ignored(self, adapter, conversation_state, recognizer, storage):
        """Test that typing activities are ignored."""
        bot = AgePromptBot(conversation_state, recognizer=recognizer)

        await (
            TestFlow(adapter, bot.on_turn)
            .send(adapter.make_activity(activity_type=ActivityTypes.TYPING))
            .assert_no_reply()
            .start_test()
        )

        assert len(storage) == 0
