"""Gemini client for supportive chat and automatic-thought analysis"""
import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from src.config import GEMINI_API_KEY, GEMINI_API_URL, CHAT_MODEL, CHAT_TIMEOUT_SECONDS
from src.exceptions import ChatAPIError, ConfigurationError, wrap_external_exception
from src.resilience.retry import retry_with_backoff

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a warm, concise assistant inside a self-help app based on cognitive "
    "behavioral therapy. Help the user notice automatic thoughts, name cognitive "
    "distortions and practise graded exposure. You are not a therapist and do not "
    "diagnose. If the user mentions self-harm or immediate danger, encourage them "
    "to contact local emergency services or a crisis line right away."
)

ANALYSIS_INSTRUCTION = (
    " Be extremely concise and clinical. Avoid long sentences. Focus on objectivity."
)

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "distortions": {
            "type": "STRING",
            "description": "Names of the distortions found (e.g. Catastrophizing, All-or-nothing).",
        },
        "reframing": {
            "type": "STRING",
            "description": "One short Socratic question that challenges the thought.",
        },
    },
    "required": ["distortions", "reframing"],
}


class ThoughtAnalysis(BaseModel):
    """Model feedback on an automatic thought"""
    distortions: str
    reframing: str


class GeminiTherapist:
    """
    Thin async client for the Gemini generateContent endpoint

    Args:
        api_key: Gemini API key (GEMINI_API_KEY)
        model: Model name (CHAT_MODEL)
        client: Optional shared httpx.AsyncClient (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        model: str = CHAT_MODEL,
        base_url: str = GEMINI_API_URL,
        timeout: float = CHAT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def chat(self, message: str) -> str:
        """
        Send a chat message

        Returns:
            The model's reply text

        Raises:
            ConfigurationError: no API key configured
            ChatAPIError: the request failed or returned no text
        """
        payload = self._build_payload(message, SYSTEM_PROMPT, temperature=0.7)
        data = await self._generate(payload, operation="chat")
        text = self._extract_text(data)
        if not text:
            raise ChatAPIError("Model returned an empty reply", operation="chat")
        return text

    async def analyze_thought(self, thought: str) -> Optional[ThoughtAnalysis]:
        """
        Ask the model to name distortions in an automatic thought

        Returns:
            ThoughtAnalysis, or None when the model's JSON could not be parsed

        Raises:
            ConfigurationError: no API key configured
            ChatAPIError: the request itself failed
        """
        prompt = (
            f'Analyze this automatic thought: "{thought}". Identify the cognitive '
            f"distortions and suggest one restructuring question. Reply only with the requested JSON."
        )
        payload = self._build_payload(
            prompt,
            SYSTEM_PROMPT + ANALYSIS_INSTRUCTION,
            temperature=0.4,
            response_schema=ANALYSIS_SCHEMA,
        )
        data = await self._generate(payload, operation="analyze_thought")

        try:
            parsed = json.loads(self._extract_text(data).strip())
            return ThoughtAnalysis.model_validate(parsed)
        except Exception as e:
            logger.error(f"Could not parse thought analysis from model: {type(e).__name__}: {e}")
            return None

    def _build_payload(
        self,
        text: str,
        system_instruction: str,
        temperature: float,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {"temperature": temperature}
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema
        return {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": generation_config,
        }

    async def _generate(self, payload: Dict[str, Any], operation: str) -> Dict[str, Any]:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set", config_key="GEMINI_API_KEY")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key}

        async def _call_gemini() -> Dict[str, Any]:
            if self._client is not None:
                response = await self._client.post(url, json=payload, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()

        try:
            return await retry_with_backoff(_call_gemini)
        except httpx.HTTPError as e:
            raise wrap_external_exception(e, operation=operation)
        except ValueError as e:
            raise ChatAPIError(f"Model response was not JSON: {e}", operation=operation, cause=e)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate"""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)
