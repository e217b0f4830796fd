"""PydanticAI-backed language model gateway for issue triage."""

from typing import Any

from pydantic_ai import Agent

from .prompts import ISSUE_TRIAGE_SYSTEM_PROMPT


class PydanticAiLlmGateway:
    """Generate raw triage text with a PydanticAI agent.

    The agent returns plain text; parsing is left to the normalizer so that
    unreliable model output degrades to a skipped triage instead of an
    agent retry loop.
    """

    def __init__(
        self,
        model_name: str,
        temperature: float = 0.1,
        max_tokens: int = 700,
        timeout_seconds: float = 7.0,
    ):
        """Initialize the gateway.

        Args:
            model_name: Model identifier (e.g., 'openai:gpt-4o-mini')
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the response
            timeout_seconds: Request timeout in seconds
        """
        self.model_name = model_name
        self.model_settings: dict[str, Any] = {
            "temperature": temperature,
            "max_tokens": max_tokens,
            "timeout": timeout_seconds,
        }
        self._agents: dict[str, Agent[None, str]] = {}

    def _get_agent(self, system_prompt: str) -> Agent[None, str]:
        """Lazy-load an agent per system prompt."""
        if system_prompt not in self._agents:
            self._agents[system_prompt] = Agent(
                model=self.model_name,
                output_type=str,
                instructions=system_prompt,
                model_settings=self.model_settings,
                retries=0,
            )
        return self._agents[system_prompt]

    async def generate(
        self, user_prompt: str, system_prompt: str = ISSUE_TRIAGE_SYSTEM_PROMPT
    ) -> str:
        """Run the model and return its raw text output."""
        result = await self._get_agent(system_prompt).run(user_prompt)
        return result.output
