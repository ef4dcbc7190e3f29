"""Pick the AnswerProvider named by the config."""
from src.answer.claude import ClaudeProvider
from src.answer.openai import OpenAICompatibleProvider
from src.answer.provider import AnswerProvider
from src.config import Config


def build_answer_provider(config: Config) -> AnswerProvider:
    match config.answer_provider:
        case "gemini" | "openai":
            return OpenAICompatibleProvider(
                config.answer_api_key,
                config.answer_model,
                base_url=config.answer_base_url,
            )
        case "claude":
            return ClaudeProvider(
                config.answer_api_key,
                config.answer_model,
                base_url=config.answer_base_url,
            )
        case other:
            raise ValueError(f"Unknown answer provider: {other}")
