from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from local_whisper.constants import (
    BACKEND_LOCAL,
    BACKEND_OPENAI,
    DEFAULT_BACKEND,
    DEFAULT_LANGUAGE,
    DEFAULT_LOCAL_MODEL,
    DEFAULT_OPENAI_MODEL,
    SWITCH_DEFER,
    SWITCH_IMMEDIATE,
)
from local_whisper.models import ModelSwitchPolicy


@dataclass(frozen=True)
class Config:
    backend: str
    model_name: str
    language: str
    model_switch_policy: ModelSwitchPolicy
    log_level: str
    openai_api_key: Optional[str]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        backend = os.getenv("WHISPER_BACKEND", DEFAULT_BACKEND).strip().lower()
        default_model = DEFAULT_OPENAI_MODEL if backend == BACKEND_OPENAI else DEFAULT_LOCAL_MODEL
        model_name = os.getenv("WHISPER_MODEL", default_model)
        language = os.getenv("WHISPER_LANGUAGE", DEFAULT_LANGUAGE)
        raw_policy = os.getenv("WHISPER_MODEL_SWITCH", SWITCH_DEFER)
        log_level = os.getenv("LOG_LEVEL", "INFO")
        openai_api_key = os.getenv("OPENAI_API_KEY") or None

        return cls._validate(
            backend=backend,
            model_name=model_name.strip(),
            language=language.strip().lower(),
            raw_policy=raw_policy.strip().lower(),
            log_level=log_level,
            openai_api_key=openai_api_key,
        )

    @staticmethod
    def _validate(
        backend: str,
        model_name: str,
        language: str,
        raw_policy: str,
        log_level: str,
        openai_api_key: Optional[str],
    ) -> "Config":
        match (backend, openai_api_key):
            case (str() as b, _) if b == BACKEND_LOCAL:
                pass
            case (str() as b, None) if b == BACKEND_OPENAI:
                raise ValueError("OPENAI_API_KEY must be set in .env when WHISPER_BACKEND=openai")
            case (str() as b, _) if b == BACKEND_OPENAI:
                pass
            case _:
                raise ValueError(f"WHISPER_BACKEND must be '{BACKEND_LOCAL}' or '{BACKEND_OPENAI}', got '{backend}'")

        match model_name:
            case "":
                raise ValueError("WHISPER_MODEL must not be empty")
            case _:
                pass

        try:
            policy = ModelSwitchPolicy(raw_policy)
        except ValueError:
            raise ValueError(f"WHISPER_MODEL_SWITCH must be '{SWITCH_DEFER}' or '{SWITCH_IMMEDIATE}', got '{raw_policy}'") from None

        return Config(
            backend=backend,
            model_name=model_name,
            language=language or DEFAULT_LANGUAGE,
            model_switch_policy=policy,
            log_level=log_level,
            openai_api_key=openai_api_key,
        )
