"""
Connection settings for the admin socket.
"""
import json
import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 11234
DEFAULT_CONFIG_PATH = os.path.join("~", ".cjdnsadmin")


@dataclass(frozen=True)
class AdminConfig:
    """Where the admin socket lives and how to talk to it."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: Optional[str] = None
    timeout: Optional[float] = None  # socket timeout in seconds, None blocks
    chunk_size: int = 1024
    verify: bool = True  # ping the socket right after connecting

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> "AdminConfig":
        """
        Load a cjdns ``.cjdnsadmin`` file.

        The file is JSON with ``addr``, ``port`` and ``password`` keys, all
        optional.
        """
        with open(os.path.expanduser(path), "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls(
            host=data.get("addr", DEFAULT_HOST),
            port=int(data.get("port", DEFAULT_PORT)),
            password=data.get("password"),
        )

    def with_overrides(self, **overrides) -> "AdminConfig":
        """Copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
