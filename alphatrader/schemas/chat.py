from typing import Any, Literal

from pydantic import BaseModel, model_validator

ProviderName = Literal["openai", "ollama"]
ProviderSelector = Literal["openai", "ollama", "auto"]


class AIMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class AIResponse(BaseModel):
    content: str
    model: str
    provider: ProviderName


class ChatRequest(BaseModel):
    messages: list[AIMessage]
    provider: ProviderSelector = "auto"

    @model_validator(mode="before")
    @classmethod
    def check_messages(cls, data: Any):
        messages = data.get("messages") if isinstance(data, dict) else None
        if not messages:
            raise ValueError("Messages are required")
        if isinstance(data, dict) and data.get("provider") is None:
            data = {**data, "provider": "auto"}
        return data


class ProvidersResponse(BaseModel):
    providers: list[str]
