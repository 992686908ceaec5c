"""Configuration and environment loading."""

__version__ = "0.1.0"

import os
import tempfile
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from mirrorbot.ports.inbound import Mirror

load_dotenv()

TRUTHY = ("1", "true", "yes", "on")

# name -> legacy fallback name
REQUIRED_ENV = {
    "DISCORD_TOKEN": "TOKEN",
    "SLACK_TOKEN": "SLACKTOKEN",
    "DISCORD_CHANNEL_ID": "DISCORDCHANNEL",
    "SLACK_CHANNEL_ID": "SLACKCHANNEL",
}


class ConfigError(Exception):
    """Raised when required settings are missing or malformed."""


def _env(name: str, environ: Mapping[str, str], default: str = "") -> str:
    value = environ.get(name, "").strip()
    if not value and name in REQUIRED_ENV:
        value = environ.get(REQUIRED_ENV[name], "").strip()
    return value or default


# ── Typed config ────────────────────────────────────────────


@dataclass
class DiscordConfig:
    token: str = ""
    channel_id: str = ""


@dataclass
class SlackConfig:
    token: str = ""
    channel_id: str = ""


@dataclass
class RelayConfig:
    poll_interval: float = 1.0
    http_timeout: float = 30.0
    tmp_dir: str = field(default_factory=tempfile.gettempdir)


@dataclass
class AppConfig:
    """Typed process configuration."""

    discord: DiscordConfig = field(default_factory=DiscordConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)
    relay: RelayConfig = field(default_factory=RelayConfig)
    extra_mirrors: str = ""
    keep_alive: bool = False
    port: int = 3000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build an AppConfig from the environment (or an explicit mapping).

        Numeric values are parsed here; missing credentials are reported by
        validate() so that all problems surface in a single error.
        """
        env = os.environ if environ is None else environ
        return cls(
            discord=DiscordConfig(
                token=_env("DISCORD_TOKEN", env),
                channel_id=_env("DISCORD_CHANNEL_ID", env),
            ),
            slack=SlackConfig(
                token=_env("SLACK_TOKEN", env),
                channel_id=_env("SLACK_CHANNEL_ID", env),
            ),
            relay=RelayConfig(
                poll_interval=_parse_float("RELAY_POLL_INTERVAL", _env("RELAY_POLL_INTERVAL", env, "1.0")),
                http_timeout=_parse_float("RELAY_HTTP_TIMEOUT", _env("RELAY_HTTP_TIMEOUT", env, "30")),
                tmp_dir=_env("RELAY_TMP_DIR", env) or tempfile.gettempdir(),
            ),
            extra_mirrors=_env("EXTRA_MIRRORS", env),
            keep_alive=_env("KEEP_ALIVE", env).lower() in TRUTHY,
            port=int(_parse_float("PORT", _env("PORT", env, "3000"))),
        )

    def validate(self) -> "AppConfig":
        """Raise ConfigError naming every missing required value."""
        values = {
            "DISCORD_TOKEN": self.discord.token,
            "SLACK_TOKEN": self.slack.token,
            "DISCORD_CHANNEL_ID": self.discord.channel_id,
            "SLACK_CHANNEL_ID": self.slack.channel_id,
        }
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise ConfigError(
                "One or more required environment variables are not set or empty: "
                + ", ".join(missing)
            )
        if not self.discord.channel_id.isdigit():
            raise ConfigError(
                f"DISCORD_CHANNEL_ID must be a numeric channel id, got {self.discord.channel_id!r}"
            )
        if self.relay.poll_interval <= 0:
            raise ConfigError("RELAY_POLL_INTERVAL must be greater than zero")
        self.mirrors()
        return self

    def mirrors(self) -> List[Mirror]:
        """Primary mirror followed by any EXTRA_MIRRORS pairs."""
        result = [Mirror(int(self.discord.channel_id), self.slack.channel_id)]
        for pair in filter(None, (p.strip() for p in self.extra_mirrors.split(","))):
            discord_id, sep, slack_id = pair.partition(":")
            if not sep or not discord_id.strip().isdigit() or not slack_id.strip():
                raise ConfigError(
                    f"EXTRA_MIRRORS entry {pair!r} must look like <discord_channel_id>:<slack_channel_id>"
                )
            mirror = Mirror(int(discord_id), slack_id.strip())
            if mirror not in result:
                result.append(mirror)
        return result


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
