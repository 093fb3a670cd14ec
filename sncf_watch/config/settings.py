from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from dotenv import dotenv_values, load_dotenv

load_dotenv()

_TIME_FMT = "%H:%M"
DEFAULT_API_BASE_URL = "https://www.sncf-connect.com/bff/api/v1"


class ConfigError(ValueError):
    """Raised when config.txt or a JSON template cannot be used."""


def _parse_int(value: str | None, default: int | None = None) -> int | None:
    if value is None or value.strip() == "":
        return default
    return int(value)


def _parse_float(value: str | None, default: float | None = None) -> float | None:
    if value is None or value.strip() == "":
        return default
    return float(value)


def _parse_time(value: str) -> time:
    return datetime.strptime(value.strip(), _TIME_FMT).time()


def _require(values: Mapping[str, str | None], key: str) -> str:
    value = values.get(key)
    if value is None or value.strip() == "":
        raise ConfigError(f"Missing required config key: {key}")
    return value.strip()


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Filter and timing settings, re-read from config.txt every batch."""

    seconds_between_each_request: int
    seconds_between_each_batch: int
    dates_to_search: Tuple[str, ...]
    minimum_departure_time: time
    train_type_direct_only: bool
    maximum_ticket_price: int

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | None]) -> "AppConfig":
        try:
            return cls(
                seconds_between_each_request=int(_require(values, "seconds_between_each_request")),
                seconds_between_each_batch=int(_require(values, "seconds_between_each_batch")),
                dates_to_search=tuple(
                    part.strip() for part in _require(values, "dates_to_search").split(",") if part.strip()
                ),
                minimum_departure_time=_parse_time(_require(values, "minimum_departure_time")),
                train_type_direct_only=_require(values, "train_type_direct_only").lower() == "true",
                maximum_ticket_price=int(_require(values, "maximum_ticket_price")),
            )
        except ConfigError:
            raise
        except ValueError as exc:
            raise ConfigError(f"Malformed config value: {exc}") from exc


def load_app_config(path: str | Path) -> AppConfig:
    """Parse the flat key=value config file at ``path``."""

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    return AppConfig.from_mapping(dotenv_values(config_path))


def load_json_template(path: str | Path) -> Dict[str, Any]:
    template_path = Path(path)
    try:
        with template_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Template not found: {template_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Template {template_path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Template {template_path} must contain a JSON object")
    return payload


@dataclass(slots=True)
class Settings:
    """Process-level settings taken from the environment."""

    config_file: Path
    payload_file: Path
    payload_more_file: Path
    headers_file: Path
    output_file: Path
    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout_seconds: float | None = None
    more_results_delay_seconds: float = 5.0
    log_level: str = "INFO"
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    email_sender: str | None = None
    email_recipient: str | None = None
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_username: str | None = None
    smtp_password: str | None = None

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    @property
    def email_enabled(self) -> bool:
        return bool(self.email_sender and self.email_recipient and self.smtp_host)


def _path_from_env(name: str, default: str) -> Path:
    return Path(os.getenv(name) or default).expanduser()


def load_settings() -> Settings:
    """Load configuration from environment variables (and .env)."""

    return Settings(
        config_file=_path_from_env("CONFIG_FILE", "config.txt"),
        payload_file=_path_from_env("PAYLOAD_FILE", "payload.json"),
        payload_more_file=_path_from_env("PAYLOAD_MORE_FILE", "payload_more.json"),
        headers_file=_path_from_env("HEADERS_FILE", "headers.json"),
        output_file=_path_from_env("OUTPUT_FILE", "output.txt"),
        api_base_url=(os.getenv("SNCF_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
        api_timeout_seconds=_parse_float(os.getenv("SNCF_API_TIMEOUT_SECONDS")),
        more_results_delay_seconds=_parse_float(os.getenv("MORE_RESULTS_DELAY_SECONDS"), default=5.0),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN") or os.getenv("TELEGRAM_BOT_KEY"),
        telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID"),
        email_sender=os.getenv("EMAIL_SENDER"),
        email_recipient=os.getenv("EMAIL_RECIPIENT"),
        smtp_host=os.getenv("SMTP_HOST"),
        smtp_port=_parse_int(os.getenv("SMTP_PORT")),
        smtp_username=os.getenv("SMTP_USERNAME"),
        smtp_password=os.getenv("SMTP_PASSWORD"),
    )
