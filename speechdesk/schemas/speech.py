from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SpeechRequest(BaseModel):
    """Body of ``POST /api/text-to-speech``.

    Every field is optional at the schema level so that missing input is
    reported as a 400 by the route instead of a validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    voice_id: Optional[str] = Field(None, alias="voiceId")
    model: Optional[str] = None
    stability: Optional[float] = None
    similarity_boost: Optional[float] = Field(None, alias="similarityBoost")


class SpeechResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    audio_data: str = Field(..., alias="audioData")
