"""Pydantic models for Neynar API responses."""

from pydantic import BaseModel


class FarcasterUser(BaseModel):
    """Farcaster account as returned by /user/bulk.

    is_pro: Neynar power badge, used as the Pro flag for pricing.
    """

    fid: int
    username: str = ""
    display_name: str = ""
    pfp_url: str = ""
    is_pro: bool = False
    custody_address: str = ""
    verifications: list[str] = []


class LoginStatus(BaseModel):
    """State of a Farcaster sign-in request ("pending" or "completed")."""

    state: str = "pending"
    fid: int | None = None
    custody_address: str = ""

    @property
    def completed(self) -> bool:
        return self.state == "completed" and self.fid is not None
