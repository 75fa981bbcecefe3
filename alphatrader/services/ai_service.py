"""AI chat providers (OpenAI and a local Ollama server) and the service that picks one."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx
import openai
from fastapi import Depends

from ..core import ConfigService, get_config_service, logger
from ..schemas import AIMessage, AIResponse

STOCK_ANALYSIS_SYSTEM_PROMPT = """You are AlphaTrader AI, an expert financial analyst assistant. You help users analyze stocks, understand market trends, and make informed investment decisions.

Key capabilities:
- Technical analysis interpretation (RSI, MACD, moving averages, support/resistance)
- Fundamental analysis (P/E, P/B, revenue growth, margins)
- Shariah compliance screening insights
- Risk assessment and portfolio recommendations

Guidelines:
- Be concise and actionable
- Always mention key risks and limitations
- Never provide specific buy/sell recommendations - instead explain the analysis
- When discussing Shariah compliance, reference AAOIFI standards
- Use clear financial terminology but explain complex concepts

Disclaimer: This is educational analysis, not financial advice. Users should consult licensed financial advisors."""


class AIServiceError(Exception):
    pass


class NoProviderAvailableError(AIServiceError):
    pass


@dataclass
class ChatOptions:
    temperature: float = 0.7
    max_tokens: int = 2000
    model: Optional[str] = None


class AIProvider(ABC):
    name: str

    @abstractmethod
    async def chat(self, messages: list[AIMessage], options: Optional[ChatOptions] = None) -> AIResponse:
        ...

    @abstractmethod
    async def is_available(self) -> bool:
        ...


class OpenAIProvider(AIProvider):
    name = "openai"

    def __init__(self, api_key: str, default_model: str = "gpt-4o-mini", client=None):
        self.api_key = api_key
        self.default_model = default_model
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def is_available(self) -> bool:
        return bool(self.api_key)

    async def chat(self, messages: list[AIMessage], options: Optional[ChatOptions] = None) -> AIResponse:
        if not self.api_key:
            raise AIServiceError("OpenAI API key not configured")
        options = options or ChatOptions()
        model = options.model or self.default_model

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[m.model_dump() for m in messages],
                temperature=options.temperature,
                max_tokens=options.max_tokens,
            )
        except openai.OpenAIError as e:
            raise AIServiceError(f"OpenAI API error: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        return AIResponse(content=content or "", model=model, provider="openai")


class OllamaProvider(AIProvider):
    name = "ollama"

    def __init__(self, base_url: str = "http://localhost:11434", default_model: str = "llama3.2",
                 timeout: float = 120.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout
        self.transport = transport

    async def is_available(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=5.0, transport=self.transport) as client:
                response = await client.get(f"{self.base_url}/api/tags")
            return response.is_success
        except httpx.HTTPError:
            return False

    @staticmethod
    def build_prompt(messages: list[AIMessage]) -> str:
        labels = {"system": "System", "user": "User", "assistant": "Assistant"}
        turns = "\n\n".join(f"{labels[m.role]}: {m.content}" for m in messages)
        return turns + "\n\nAssistant:"

    async def chat(self, messages: list[AIMessage], options: Optional[ChatOptions] = None) -> AIResponse:
        options = options or ChatOptions()
        model = options.model or self.default_model
        payload = {
            "model": model,
            "prompt": self.build_prompt(messages),
            "stream": False,
            "options": {
                "temperature": options.temperature,
                "num_predict": options.max_tokens,
            },
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise AIServiceError(f"Ollama API error: {e}") from e

        return AIResponse(content=data.get("response") or "", model=model, provider="ollama")


class AIService:
    def __init__(self, openai_provider: AIProvider, ollama_provider: AIProvider, preferred_provider: str = "auto"):
        self.openai = openai_provider
        self.ollama = ollama_provider
        self.preferred_provider = preferred_provider

    async def get_available_providers(self) -> list[str]:
        available = []
        if await self.openai.is_available():
            available.append("openai")
        if await self.ollama.is_available():
            available.append("ollama")
        return available

    async def chat(self, messages: list[AIMessage], options: Optional[ChatOptions] = None) -> AIResponse:
        if self.preferred_provider == "openai" and await self.openai.is_available():
            return await self.openai.chat(messages, options)
        if self.preferred_provider == "ollama" and await self.ollama.is_available():
            return await self.ollama.chat(messages, options)

        # auto, or the preferred provider is down: OpenAI first, then Ollama
        for provider in (self.openai, self.ollama):
            if await provider.is_available():
                if self.preferred_provider not in ("auto", provider.name):
                    logger.info("Preferred AI provider %s unavailable, using %s",
                                self.preferred_provider, provider.name)
                return await provider.chat(messages, options)

        raise NoProviderAvailableError(
            "No AI provider available. Configure OpenAI API key or run Ollama locally."
        )


def with_system_prompt(messages: list[AIMessage], system_prompt: str = STOCK_ANALYSIS_SYSTEM_PROMPT) -> list[AIMessage]:
    return [AIMessage(role="system", content=system_prompt), *messages]


class AIServiceFactory:
    def __init__(self, config_service: ConfigService):
        self.config_service = config_service

    def __call__(self, provider: str = "auto") -> AIService:
        config = self.config_service
        return AIService(
            openai_provider=OpenAIProvider(
                api_key=config.get("OPENAI_API_KEY", ""),
                default_model=config.get("OPENAI_MODEL", "gpt-4o-mini"),
            ),
            ollama_provider=OllamaProvider(
                base_url=config.get("OLLAMA_BASE_URL", "http://localhost:11434"),
                default_model=config.get("OLLAMA_MODEL", "llama3.2"),
            ),
            preferred_provider=provider,
        )


def get_ai_service_factory(config_service: ConfigService = Depends(get_config_service)) -> AIServiceFactory:
    return AIServiceFactory(config_service)
