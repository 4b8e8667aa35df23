"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from portfolio_ai.safety.policies import DEFAULT_POLICIES, RateLimitPolicy

KEY_SCOPES = ("feature", "caller")
STORAGE_SCHEME_SEPARATOR = "://"


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    optimizer_model: str = "claude-sonnet-4-5-20250929"
    max_retries: int = 2
    timeout: int = 60
    max_tokens: int = 2048


@dataclass(frozen=True)
class PolicyConfig:
    max_requests_per_window: int
    max_payload_chars: int
    timeout_seconds: float


@dataclass(frozen=True)
class RateLimitConfig:
    window_seconds: int = 60
    key_scope: str = "feature"
    storage_uri: str = "memory://"
    health_check_interval_seconds: int = 60


@dataclass(frozen=True)
class LayoutConfig:
    page_width: float = 210.0
    page_height: float = 297.0
    margin: float = 12.0
    line_height: float = 3.8
    section_spacing: float = 4.0
    item_spacing: float = 2.0
    bottom_slack: float = 15.0
    skills_slack: float = 45.0


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:3000",)
    profile_path: str = "data/profile.yaml"
    chat_max_response_chars: int = 800


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    policies: dict[str, PolicyConfig] = field(
        default_factory=lambda: {
            name: PolicyConfig(
                max_requests_per_window=p.max_requests_per_window,
                max_payload_chars=p.max_payload_chars,
                timeout_seconds=p.timeout_seconds,
            )
            for name, p in DEFAULT_POLICIES.items()
        }
    )
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def policy(self, name: str) -> RateLimitPolicy:
        """Build the immutable rate limit policy for a feature."""
        try:
            cfg = self.policies[name]
        except KeyError:
            raise KeyError(f"Unknown rate limit policy: {name}") from None
        return RateLimitPolicy(
            name=name,
            max_requests_per_window=cfg.max_requests_per_window,
            max_payload_chars=cfg.max_payload_chars,
            timeout_seconds=cfg.timeout_seconds,
            window_seconds=self.rate_limit.window_seconds,
        )


def _check_range(section: str, name: str, value: float, low: float, high: float) -> None:
    if not (low <= value <= high):
        raise ValueError(f"{section}.{name} must be between {low} and {high}, got {value}")


def _validate(config: AppConfig) -> None:
    _check_range("llm", "timeout", config.llm.timeout, 1, 600)
    _check_range("llm", "max_retries", config.llm.max_retries, 0, 10)
    _check_range("rate_limit", "window_seconds", config.rate_limit.window_seconds, 1, 86400)
    _check_range(
        "rate_limit",
        "health_check_interval_seconds",
        config.rate_limit.health_check_interval_seconds,
        1,
        86400,
    )
    if config.rate_limit.key_scope not in KEY_SCOPES:
        raise ValueError(
            f"rate_limit.key_scope must be one of {KEY_SCOPES}, got {config.rate_limit.key_scope!r}"
        )
    uri = config.rate_limit.storage_uri
    scheme = uri.split(STORAGE_SCHEME_SEPARATOR, 1)[0]
    if STORAGE_SCHEME_SEPARATOR not in uri or not scheme or scheme.startswith("async+"):
        raise ValueError(f"rate_limit.storage_uri must be a synchronous limits storage URI, got {uri!r}")
    for name, policy in config.policies.items():
        section = f"policies.{name}"
        _check_range(section, "max_requests_per_window", policy.max_requests_per_window, 1, 10_000)
        _check_range(section, "max_payload_chars", policy.max_payload_chars, 1, 1_000_000)
        _check_range(section, "timeout_seconds", policy.timeout_seconds, 0.001, 600)

    layout = config.layout
    _check_range("layout", "margin", layout.margin, 0, min(layout.page_width, layout.page_height) / 4)
    _check_range("layout", "line_height", layout.line_height, 0.5, 50)
    if layout.margin + layout.bottom_slack >= layout.page_height / 2:
        raise ValueError("layout.bottom_slack leaves no usable page height")
    if layout.skills_slack < layout.bottom_slack:
        raise ValueError("layout.skills_slack must not be smaller than layout.bottom_slack")
    _check_range("server", "port", config.server.port, 1, 65535)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    defaults = AppConfig()
    policies = dict(defaults.policies)
    for name, values in (raw.get("policies") or {}).items():
        base = policies.get(name)
        merged = {
            "max_requests_per_window": base.max_requests_per_window if base else None,
            "max_payload_chars": base.max_payload_chars if base else None,
            "timeout_seconds": base.timeout_seconds if base else None,
            **(values or {}),
        }
        missing = [k for k, v in merged.items() if v is None]
        if missing:
            raise ValueError(f"policies.{name} is missing {', '.join(missing)}")
        policies[name] = PolicyConfig(**merged)

    server_raw = dict(raw.get("server", {}))
    if "cors_origins" in server_raw:
        server_raw["cors_origins"] = tuple(server_raw["cors_origins"] or ())

    config = AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        rate_limit=RateLimitConfig(**raw.get("rate_limit", {})),
        policies=policies,
        layout=LayoutConfig(**raw.get("layout", {})),
        server=ServerConfig(**server_raw),
    )
    _validate(config)
    return config
