#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Module for generating commit messages using OpenAI's LLM."""

import logging
import os
from typing import Callable, List, Optional, Type, Union

from pydantic import BaseModel
from dotenv import load_dotenv
from langchain_openai import ChatOpenAI
from langchain_core.runnables import Runnable
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage, BaseMessage

from commit_buddy.schemas import CommitMessage
from commit_buddy.config import (
    API_KEY_ENV_VAR,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    MAX_TOKENS,
    SYSTEM_PROMPT,
)
from commit_buddy.settings import commit_buddy_logger
from commit_buddy.errors import (
    ApiKeyMissingError,
    GenerationError,
    TokenLimitExceededError,
)

# Load .env automatically
load_dotenv()


class ChatCommitBuddy:
    """Turn a staged diff into a single commit message.

    Every call to :meth:`generate` sends exactly one structured-output request
    to the chat model. Failures are not retried.

    Attributes:
        model (str): The OpenAI model name to use.
        output (Type[BaseModel]): The output schema for structured responses.
        max_tokens (int): Maximum allowed tokens for input diff.
        llm (BaseChatModel): The language model instance.
        structured_llm (Runnable): The structured output language model.
    """

    # --- Initialization ---
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        output: Type[BaseModel] = CommitMessage,
        llm: Optional[Union[ChatOpenAI, BaseChatModel]] = None,
        structured_llm: Optional[Runnable] = None,
        get_env: Callable[[str], Optional[str]] = os.getenv,
        max_tokens: int = MAX_TOKENS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize ChatCommitBuddy with configuration and dependencies.

        Args:
            api_key: OpenAI API key. Falls back to the OPENAI_API_KEY variable.
            model: OpenAI model name to use.
            output: Pydantic model class for structured output.
            llm: Pre-configured language model instance.
            structured_llm: Pre-configured structured output runnable.
            get_env: Function to retrieve environment variables.
            max_tokens: Maximum allowed tokens for input diff.

        Raises:
            ApiKeyMissingError: If no API key is given or found in the environment.
        """
        self._logger = logger or commit_buddy_logger(__name__)
        self._logger.debug("Initializing ChatCommitBuddy with model: %s", model)

        self.model = model
        self.output = output
        self.max_tokens = max_tokens
        self._get_env = get_env
        self._api_key = self._resolve_api_key(api_key)

        self.llm = llm or self._build_model()
        self.structured_llm = structured_llm or self._build_structured_llm()

    # --- Public methods ---
    def generate(self, diff: str) -> str:
        """Generate a commit message for a diff.

        Args:
            diff: Git diff content.

        Returns:
            The commit message exactly as the model produced it.

        Raises:
            TokenLimitExceededError: If diff exceeds token limit.
            GenerationError: If the request fails or the response is unusable.
        """
        self._logger.debug("Starting commit message generation")
        self._logger.debug("Diff length: %d characters", len(diff))

        self._validate_num_tokens(diff)
        result = self._invoke_structured_llm(self._build_messages(diff))

        if not isinstance(result, self.output):
            raise GenerationError(
                f"Malformed response from {self.model}: expected {self.output.__name__}, "
                f"got {type(result).__name__}"
            )

        commit_message = result.commit_message
        if not commit_message or not commit_message.strip():
            raise GenerationError(f"{self.model} returned an empty commit message")

        self._logger.debug("Commit message generation completed successfully")
        return commit_message

    # --- Private methods ---
    def _validate_num_tokens(self, diff: str) -> int:
        """Validate that diff doesn't exceed token limit.

        Raises:
            TokenLimitExceededError: If diff exceeds maximum token limit.
            GenerationError: If the tokenizer cannot count the diff.
        """
        try:
            num_tokens = self.llm.get_num_tokens(diff)
        except Exception as e:
            self._logger.error("Failed to count diff tokens: %s", e)
            raise GenerationError(f"Failed to count diff tokens: {e}") from e

        self._logger.debug(
            "Diff token count: %d (max allowed: %d)", num_tokens, self.max_tokens
        )

        if num_tokens > self.max_tokens:
            error_msg = (
                f"Diff is too long. Max tokens: {self.max_tokens}, "
                f"diff tokens: {num_tokens}"
            )
            self._logger.error(error_msg)
            raise TokenLimitExceededError(error_msg)

        return num_tokens

    def _invoke_structured_llm(self, messages: List[BaseMessage]):
        try:
            result = self.structured_llm.invoke(messages)
        except Exception as e:
            self._logger.error("Failed to generate commit message: %s", e)
            self._logger.debug("Structured LLM invocation failed", exc_info=True)
            raise GenerationError(f"Failed to generate commit message: {e}") from e

        self._logger.debug("Structured LLM returned %s", type(result).__name__)
        return result

    def _build_model(self) -> ChatOpenAI:
        """Build ChatOpenAI model instance without client-side retries."""
        self._logger.debug("Building ChatOpenAI model with name: %s", self.model)

        return ChatOpenAI(
            model=self.model,
            temperature=DEFAULT_TEMPERATURE,
            api_key=self._api_key,
            max_retries=0,
        )

    def _build_structured_llm(self) -> Runnable:
        """Build a strict JSON-schema runnable from the base LLM."""
        self._logger.debug(
            "Building structured LLM with output schema: %s", self.output.__name__
        )

        return self.llm.with_structured_output(
            self.output, method="json_schema", strict=True
        )

    def _resolve_api_key(self, api_key: Optional[str]) -> str:
        """Return the explicit key or the one found in the environment.

        Raises:
            ApiKeyMissingError: If neither is available.
        """
        resolved = api_key or self._get_env(API_KEY_ENV_VAR)
        if not resolved:
            error_msg = f"Missing {API_KEY_ENV_VAR}. Pass --api-key or set it in your .env file."
            self._logger.error(error_msg)
            raise ApiKeyMissingError(error_msg)

        return resolved

    # --- Internal helpers ---
    @staticmethod
    def _build_messages(
        diff: str, system_prompt: str = SYSTEM_PROMPT
    ) -> List[BaseMessage]:
        """Build message list for LLM from diff and system prompt."""
        return [
            SystemMessage(content=system_prompt),
            HumanMessage(
                content=f"Here is the diff of the files that are staged for commit:\n{diff}"
            ),
        ]

    # --- Dunder methods ---
    def __repr__(self) -> str:
        """Return a machine-readable representation of ChatCommitBuddy."""
        return (
            f"{self.__class__.__name__}(model={self.model!r}, "
            f"max_tokens={self.max_tokens}, "
            f"output={self.output.__name__})"
        )

    def __str__(self) -> str:
        """Return a human-readable description of ChatCommitBuddy."""
        return f"ChatCommitBuddy using {self.model} with {self.max_tokens} max tokens"
