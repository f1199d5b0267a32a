# discovery_apis/recommendations.py

from __future__ import annotations

import os
import logging
from typing import List

from pydantic import BaseModel, Field

from utils.gemini_client import DEFAULT_RECOMMENDATION_MODEL, call_predict_with_schema

logger = logging.getLogger(__name__)

MIN_DESTINATIONS = 3
MAX_DESTINATIONS = 5


class DestinationRecommendation(BaseModel):
    name: str = Field(description="Name of the destination")
    location: str = Field(description="Country or region")
    description: str = Field(description="Detailed description of why this destination is recommended")
    bestTime: str = Field(description="Best time to visit")
    budget: str = Field(description="Estimated budget range")
    highlights: List[str] = Field(description="Top highlights and activities")
    travelTips: List[str] = Field(description="Practical travel tips")


class Recommendations(BaseModel):
    destinations: List[DestinationRecommendation] = Field(min_length=MIN_DESTINATIONS, max_length=MAX_DESTINATIONS)
    summary: str = Field(description="Overall summary of the recommendations")


def build_recommendation_prompt(prompt):
    return f"""You are an expert travel advisor. Based on the following travel request, provide {MIN_DESTINATIONS}-{MAX_DESTINATIONS} personalized destination recommendations with detailed information: "{prompt}"

      IMPORTANT: All budget amounts MUST be in Thai Baht (THB/฿). Convert any mentioned currencies to THB.
      - Use format: "฿50,000-฿80,000" or "฿2,000 per day"
      - 1 USD ≈ ฿35, 1 EUR ≈ ฿38, 1 GBP ≈ ฿44

      Consider factors like:
      - Budget constraints mentioned (convert to THB)
      - Duration of trip
      - Travel style (adventure, relaxation, culture, etc.)
      - Season and weather
      - Activities and experiences
      - Practical considerations

      Make recommendations diverse and well-suited to the request."""


def get_recommendations(prompt):
    """Destination recommendations for a free-text travel request, as a plain dict."""
    model = os.environ.get('GEMINI_RECOMMENDATION_MODEL', DEFAULT_RECOMMENDATION_MODEL)
    logger.info(f"Generating recommendations for: {prompt}")
    result = call_predict_with_schema(build_recommendation_prompt(prompt), Recommendations, model)
    return result.model_dump()
