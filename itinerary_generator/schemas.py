"""
Structured-output schemas sent to Gemini for itinerary generation.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ActivityType = Literal["attraction", "food", "transport", "accommodation"]


class GeneratedActivity(BaseModel):
    time: str = Field(description="Time in 12-hour format")
    title: str
    location: str
    description: str
    duration: str
    type: ActivityType
    estimatedCost: Optional[float] = None


class GeneratedDay(BaseModel):
    day: int
    date: str
    theme: str = Field(description="Theme or focus of the day")
    activities: List[GeneratedActivity]


class GeneratedItinerary(BaseModel):
    days: List[GeneratedDay]
    tips: List[str] = Field(description="General travel tips for the destination")
