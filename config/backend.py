import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


class BackendConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_url: str = Field(default="http://localhost:8000", description="Backend origin")
    static_url: Optional[str] = Field(default=None, description="Origin serving uploaded photos")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")

    @classmethod
    def from_env(cls) -> "BackendConfig":
        load_dotenv()
        api_url = os.environ.get("REGISTRATION_API_URL", "http://localhost:8000")
        return cls(
            api_url=api_url,
            static_url=os.environ.get("REGISTRATION_STATIC_URL") or None,
            timeout=float(os.environ.get("REGISTRATION_API_TIMEOUT", "10")),
        )

    @property
    def registrations_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/api/registrations"

    def photo_url(self, reference: Optional[str]) -> Optional[str]:
        """
        Resolve a backend photo reference (e.g. "uploads/abc.png") into a
        displayable URL.
        """
        if not reference:
            return None
        if reference.startswith(("http://", "https://", "data:")):
            return reference
        base = (self.static_url or self.api_url).rstrip("/")
        return f"{base}/{reference.lstrip('/')}"
