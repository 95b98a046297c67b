# agents/llm_client.py
from typing import Awaitable, Callable, Optional

import google.generativeai as genai

DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiClient:
    """
    Thin async wrapper over a Gemini model that always asks for a JSON body.
    The model name doubles as the deployment identifier; ``api_endpoint``
    points the SDK at a non-default service host.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL,
                 api_endpoint: Optional[str] = None, temperature: float = 0.0,
                 max_tokens: int = 2048):
        if not api_key:
            raise ValueError("GEMINI_API_KEY is missing")
        client_options = {"api_endpoint": api_endpoint} if api_endpoint else None
        genai.configure(api_key=api_key, client_options=client_options)
        self.model_name = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate_json(self, prompt: str, system_instruction: str) -> str:
        model = genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
        response = await model.generate_content_async(
            prompt,
            generation_config=genai.types.GenerationConfig(
                max_output_tokens=self.max_tokens,
                temperature=self.temperature,
                response_mime_type="application/json",
            ),
        )
        return (response.text or "").strip()


# (prompt, system_instruction) -> raw model text
LLMCall = Callable[[str, str], Awaitable[str]]
