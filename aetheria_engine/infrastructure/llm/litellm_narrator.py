import asyncio
import json
import re
from typing import List, Optional

import litellm
from pydantic import ValidationError

from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.application.ports.narrator_service import (
    INarratorService,
    NarratorConfigurationError,
    NarratorContext,
    NarratorError,
    NarratorRateLimitError,
    NarratorResponse,
    looks_rate_limited,
)
from aetheria_engine.infrastructure.config.settings import LLMSettings, settings

SYSTEM_DIRECTIVE = """You are the Dungeon Master for 'Aetheria Chronicles'.
Narrate vividly in the second person, at most three sentences per turn.

CAMPAIGN GOAL: Find the "Aether Core" deep in a Dungeon. The journey starts in the Plains and Forests.

COMBAT RULES:
1. During combat the player provides a d20 roll and a total. Use it with their stats to decide hit and damage.
2. If an enemy appears, set 'combat_start' to true and provide 'enemy_name', 'enemy_hp', 'enemy_desc' and 'enemy_type'.
3. Report damage dealt to the enemy in 'enemy_damage_taken'. If the enemy dies or the player flees, set 'combat_ended' to true.

INVENTORY RULES:
1. If 'is_overencumbered' is true, the player moves slower and has disadvantage in combat (narrate this).
2. Items must have realistic weights (e.g. Dagger 1.0, Armor 10.0, Potion 0.1).

MAP RULES:
1. 'movement_direction': if the player walks somewhere, infer NORTH, SOUTH, EAST or WEST; otherwise NONE.
2. 'current_terrain_type': must match the environment the player is in after moving.

Reply with a single JSON object that conforms to this JSON schema:
{schema}

CONTEXT:
{context}
"""

_CODE_FENCE_PATTERN = re.compile(r'^\s*```(?:json)?\s*(.*?)\s*```\s*$', re.DOTALL)


def _strip_code_fence(raw: str) -> str:
    match = _CODE_FENCE_PATTERN.match(raw)
    return match.group(1) if match else raw.strip()


class LitellmNarrator(INarratorService):
    """
    Implementation of INarratorService using the LiteLLM library.
    It reaches any provider LiteLLM supports (Gemini, OpenAI, local models via Ollama, ...)
    and asks for a JSON response that is validated against NarratorResponse.
    """

    def __init__(self, logger: ILogger, llm_settings: Optional[LLMSettings] = None, retry_delay: float = 1.0):
        self._settings = llm_settings or settings.llm
        self._logger = logger
        self._retry_delay = retry_delay
        self.model_name = self._settings.model_name

        litellm.drop_params = True
        self._logger.info(
            f"[LLM] Using LiteLLM with model: {self.model_name}, API Base: {self._settings.api_base or 'default'}"
        )

    def _ensure_configured(self) -> None:
        if self._settings.require_api_key and not self._settings.api_key:
            raise NarratorConfigurationError("LLM_API_KEY is missing.")

    def _build_messages(self, context: NarratorContext, action_text: str) -> List[dict]:
        system_message = SYSTEM_DIRECTIVE.format(
            schema=json.dumps(NarratorResponse.model_json_schema()),
            context=context.model_dump_json(indent=2),
        )
        return [
            {"role": "system", "content": system_message},
            {"role": "user", "content": action_text},
        ]

    async def _get_llm_response(self, messages: List[dict]) -> str:
        max_retries = max(1, self._settings.max_retries)
        for attempt in range(max_retries):
            try:
                response = await litellm.acompletion(
                    model=self.model_name,
                    messages=messages,
                    temperature=self._settings.temperature,
                    max_tokens=self._settings.max_tokens,
                    response_format={"type": "json_object"},
                    api_key=self._settings.api_key or None,
                    api_base=self._settings.api_base,
                )
                content = response.choices[0].message.content
                if not content:
                    raise NarratorError("The narrator returned an empty response.")
                return content
            except litellm.RateLimitError as e:
                raise NarratorRateLimitError(str(e)) from e
            except litellm.AuthenticationError as e:
                raise NarratorConfigurationError(str(e)) from e
            except (litellm.APIConnectionError, litellm.Timeout, litellm.ServiceUnavailableError) as e:
                self._logger.warning(f"[LLM] Call failed on attempt {attempt + 1}/{max_retries}. Error: {e}")
                if attempt + 1 == max_retries:
                    raise NarratorError(f"The narrator is unreachable: {e}") from e
                await asyncio.sleep(self._retry_delay)
            except NarratorError:
                raise
            except Exception as e:
                self._logger.error(f"[LLM] Error calling LiteLLM: {e}")
                if looks_rate_limited(str(e)):
                    raise NarratorRateLimitError(str(e)) from e
                raise NarratorError(str(e)) from e
        raise NarratorError("The narrator did not answer.")

    async def generate_turn(self, context: NarratorContext, action_text: str) -> NarratorResponse:
        """
        Narrates one turn and returns the validated structured response.
        A response that is not valid JSON for the schema is a NarratorError;
        nothing of it is used.
        """
        self._ensure_configured()
        messages = self._build_messages(context, action_text)
        raw_content = await self._get_llm_response(messages)
        try:
            return NarratorResponse.model_validate_json(_strip_code_fence(raw_content))
        except ValidationError as e:
            self._logger.error(f"[LLM] Narrator response failed validation: {e}")
            raise NarratorError("The narrator's response did not match the expected schema.") from e
