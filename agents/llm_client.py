# agents/llm_client.py
import logging

import google.generativeai as genai

from errors import ModelInvocationError

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = "You are an expert code reviewer. Only respond with the requested JSON format."

# fixed sampling configuration for every review request
GENERATION_SETTINGS = {
    "temperature": 0.1,
    "max_output_tokens": 1000,
    "top_p": 1.0,
    "frequency_penalty": 0.1,
    "presence_penalty": 0.1,
    "response_mime_type": "application/json",
}


class LLMClient:
    """
    Gemini wrapper used by the review agent.

    Any provider-side failure (network, quota, blocked prompt, empty
    candidate) is raised as ModelInvocationError.
    """

    def __init__(self, api_key: str, model_name: str, timeout: float = 60.0):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout = timeout
        self.model = genai.GenerativeModel(model_name, system_instruction=SYSTEM_INSTRUCTION)

    async def generate(self, prompt: str) -> str:
        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(**GENERATION_SETTINGS),
                request_options={"timeout": self.timeout},
            )
            # .text raises ValueError when the candidate was blocked or is empty
            return response.text.strip()
        except Exception as e:
            logger.warning("Model %s call failed: %s", self.model_name, e)
            raise ModelInvocationError(f"{self.model_name}: {e}") from e
