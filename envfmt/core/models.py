from dataclasses import dataclass
from typing import NamedTuple, Optional


class Parameter(NamedTuple):
    key: str
    value: str


class NormalizedParameter(NamedTuple):
    identifier: str
    value: str


@dataclass(frozen=True)
class SourceConfig:
    """Everything the Parameter Store adapter needs to open a session.

    Built once by the CLI so the adapter never consults the environment itself.
    """

    region: str
    profile: Optional[str] = None
    mfa: bool = False
    mfa_token: Optional[str] = None

    @property
    def uses_mfa(self) -> bool:
        return self.mfa or self.mfa_token is not None
