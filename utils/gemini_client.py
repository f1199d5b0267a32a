# utils/gemini_client.py

import os
import time
import logging
from typing import Type, TypeVar

from google import genai

logger = logging.getLogger(__name__)

DEFAULT_ITINERARY_MODEL = "gemini-2.5-flash"
DEFAULT_RECOMMENDATION_MODEL = "gemini-2.0-flash-exp"

T = TypeVar("T")


class GeminiInvalidResponseException(Exception):
    pass


def get_api_key():
    api_key = os.environ.get('GOOGLE_GENERATIVE_AI_API_KEY')
    if not api_key:
        raise RuntimeError("GOOGLE_GENERATIVE_AI_API_KEY not configured")
    return api_key


def call_predict_with_schema(query: str, response_schema: Type[T], model: str) -> T:
    """
    Calls Gemini with a pydantic response schema and returns the parsed object.
    Raises GeminiInvalidResponseException when the model returns nothing usable.
    """
    client = genai.Client(api_key=get_api_key())
    start_time = time.time()
    truncated_query = (query[:200] + "...") if len(query) > 200 else query
    logger.info(f"Calling Gemini ({model}) with schema {response_schema.__name__}, prompt: '{truncated_query}'")

    response = client.models.generate_content(
        model=model,
        contents=query,
        config={
            "response_mime_type": "application/json",
            "response_schema": response_schema,
        },
    )
    logger.info(f"Gemini with schema call took: {time.time() - start_time:.2f}s")
    if not response.parsed:
        raise GeminiInvalidResponseException(f"Empty structured response from {model}")
    return response.parsed
