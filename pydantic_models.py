from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

MAX_ITEMS = 2


class ChatRequest(BaseModel):
    userInput: str


class StructuredAnswer(BaseModel):
    summary: str = ""
    symptoms: List[str] = Field(default_factory=list)
    remedies: List[str] = Field(default_factory=list)
    precautions: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @field_validator("symptoms", "remedies", "precautions")
    @classmethod
    def _cap_items(cls, v: List[str]) -> List[str]:
        return v[:MAX_ITEMS]

    @classmethod
    def failure(cls, error: str, summary: str) -> "StructuredAnswer":
        return cls(error=error, summary=summary)

    def to_json(self) -> dict:
        # failures go out as {error, summary} only
        if self.error is not None:
            return self.model_dump(include={"error", "summary"})
        return self.model_dump(exclude_none=True)
