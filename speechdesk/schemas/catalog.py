"""Vendor catalog entries as seen by the client.

The proxy relays vendor JSON verbatim; these models only give the client a
typed view. Unknown vendor fields are kept on the instance.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Voice(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    voice_id: str
    name: str
    preview_url: Optional[str] = None


class SpeechModel(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, protected_namespaces=())

    model_id: str
    name: str
    description: Optional[str] = None
