from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from src.constants import (
    CAMERA_MAX_DEVICES,
    DEFAULT_ANSWER_PROVIDER,
    DEFAULT_BASE_URLS,
    DEFAULT_MODELS,
    DEFAULT_ZOOM_RANGE,
    GENERIC_API_KEY_ENV,
    PROVIDER_API_KEY_ENV,
)
from src.errors import AuthConfigError


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    answer_provider: str
    answer_api_key: str
    answer_model: str
    answer_base_url: Optional[str]
    camera_max_devices: int
    camera_zoom_range: tuple[float, float, float]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        provider = os.getenv("ANSWER_PROVIDER", DEFAULT_ANSWER_PROVIDER).strip().lower()
        api_key = os.getenv(GENERIC_API_KEY_ENV) or os.getenv(
            PROVIDER_API_KEY_ENV.get(provider, GENERIC_API_KEY_ENV)
        ) or None
        model = os.getenv("ANSWER_MODEL") or DEFAULT_MODELS.get(provider, "")
        base_url = os.getenv("ANSWER_BASE_URL") or DEFAULT_BASE_URLS.get(provider)
        max_devices = os.getenv("CAMERA_MAX_DEVICES", str(CAMERA_MAX_DEVICES))
        raw_zoom = os.getenv("CAMERA_ZOOM_RANGE", DEFAULT_ZOOM_RANGE)

        zoom_range = tuple(float(part) for part in raw_zoom.split(",") if part.strip())

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            answer_provider=provider,
            answer_api_key=api_key,
            answer_model=model,
            answer_base_url=base_url,
            camera_max_devices=int(max_devices),
            camera_zoom_range=zoom_range,
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
        log_level: str,
        answer_provider: str,
        answer_api_key: Optional[str],
        answer_model: str,
        answer_base_url: Optional[str],
        camera_max_devices: int,
        camera_zoom_range: tuple[float, ...],
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        match answer_provider:
            case provider if provider not in PROVIDER_API_KEY_ENV:
                raise ValueError(
                    f"ANSWER_PROVIDER must be one of {', '.join(PROVIDER_API_KEY_ENV)}"
                )
            case _:
                pass

        match answer_api_key:
            case None | "":
                raise AuthConfigError(
                    f"{GENERIC_API_KEY_ENV} or {PROVIDER_API_KEY_ENV[answer_provider]} "
                    "must be set in .env"
                )
            case _:
                pass

        match camera_zoom_range:
            case (low, high, step) if low <= high and step > 0:
                pass
            case _:
                raise ValueError("CAMERA_ZOOM_RANGE must be 'min,max,step' with min <= max")

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
            log_level=log_level,
            answer_provider=answer_provider,
            answer_api_key=answer_api_key,
            answer_model=answer_model,
            answer_base_url=answer_base_url,
            camera_max_devices=camera_max_devices,
            camera_zoom_range=camera_zoom_range,
        )
