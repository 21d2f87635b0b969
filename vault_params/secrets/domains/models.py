"""Domain models for Vault parameter access."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VaultConfig:
    """Connection settings for a Vault-compatible secret store."""
    base_url: str
    token: str
    namespace: Optional[str] = None

    def __repr__(self) -> str:
        # Keep the token out of tracebacks and log lines
        return (
            f"VaultConfig(base_url={self.base_url!r}, token='***', "
            f"namespace={self.namespace!r})"
        )
