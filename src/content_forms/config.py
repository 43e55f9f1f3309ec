"""
Configuration for content-forms.

Settings come from environment variables (a local .env file is read
first) and fall back to the dataclass defaults.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from content_forms.constants import DEFAULT_HANDLE_LENGTH

load_dotenv()


@dataclass
class ContentFormsConfig:
    """Configuration settings for content-forms."""

    # Record identity
    handle_length: int = DEFAULT_HANDLE_LENGTH

    # Logging settings
    log_level: str = "INFO"
    log_file: str | None = None
    verbose_output: bool = False

    # MCP server
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8080

    # Tool output
    indent_json_output: int = 2

    @classmethod
    def from_env(cls) -> "ContentFormsConfig":
        """Read settings from the environment, keeping the default for any unset variable."""
        _defaults = cls()

        return cls(
            handle_length=int(os.getenv("CONTENT_FORMS_HANDLE_LENGTH", str(_defaults.handle_length))),
            log_level=os.getenv("CONTENT_FORMS_LOG_LEVEL", _defaults.log_level).upper(),
            log_file=os.getenv("CONTENT_FORMS_LOG_FILE") or _defaults.log_file,
            verbose_output=os.getenv("CONTENT_FORMS_VERBOSE_OUTPUT", str(_defaults.verbose_output).lower()).lower() == "true",
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_host=os.getenv("MCP_HOST", _defaults.mcp_host),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
            indent_json_output=int(os.getenv("CONTENT_FORMS_INDENT_JSON_OUTPUT", str(_defaults.indent_json_output))),
        )


config = ContentFormsConfig.from_env()


def get_config() -> ContentFormsConfig:
    """Process-wide configuration."""
    return config


def update_config(**kwargs) -> ContentFormsConfig:
    """Override settings in place; unknown names are ignored."""
    for name, value in kwargs.items():
        if hasattr(config, name):
            setattr(config, name, value)
    return config
