"""Entry point — wires Config → AnswerProvider + CameraSession → Orchestrator → TelegramClient."""
import logging

from rich.logging import RichHandler

from src.answer.factory import build_answer_provider
from src.capture.camera import CameraSession
from src.capture.opencv import OpenCVCameraBackend
from src.config import Config
from src.constants import MSG_BOT_STARTING, MSG_PROVIDER_READY
from src.orchestrator import Orchestrator
from src.session import AnswerSession
from src.telegram.client import TelegramClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def main() -> None:
    # A missing credential raises AuthConfigError here, before anything is built.
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    provider = build_answer_provider(config)
    logger.info(MSG_PROVIDER_READY, config.answer_provider, provider.model)

    camera = CameraSession(
        OpenCVCameraBackend(
            max_devices=config.camera_max_devices,
            zoom_range=config.camera_zoom_range,
        )
    )
    orchestrator = Orchestrator(
        AnswerSession(provider),
        camera,
        provider_name=config.answer_provider,
        model=provider.model,
    )
    TelegramClient(config, orchestrator).run()


if __name__ == "__main__":
    main()
