"""Runtime objects shared by the API routers.

Populated once by ``build_registry()`` at startup (or by tests with mocks).
Everything runs in one process, so routers read these references directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.api.sessions import AuthSessionStore
    from src.clients.neynar.client import NeynarClient
    from src.clients.pinata.client import PinataClient
    from src.clients.stability.client import StabilityClient
    from src.clients.together.client import TogetherClient
    from src.clients.transformer import ImageTransformer
    from src.minting.ledger import MintLedger


class Registry:
    """Holds references to the ledger, upstream clients and session store."""

    ledger: MintLedger | None = None
    sessions: AuthSessionStore | None = None
    neynar: NeynarClient | None = None
    pinata: PinataClient | None = None
    together: TogetherClient | None = None
    stability: StabilityClient | None = None
    transformer: ImageTransformer | None = None

    async def close(self) -> None:
        for client in (self.neynar, self.pinata, self.together, self.stability):
            if client is not None:
                await client.close()


registry = Registry()


def build_registry(target: Registry | None = None) -> Registry:
    """Wire the ledger and clients from settings."""
    from config.settings import settings
    from src.api.sessions import AuthSessionStore
    from src.clients.neynar.client import NeynarClient
    from src.clients.pinata.client import PinataClient
    from src.clients.stability.client import StabilityClient
    from src.clients.together.client import TogetherClient
    from src.clients.transformer import ImageTransformer
    from src.minting.ledger import MintLedger
    from src.minting.params import MintingParameters
    from src.minting.units import parse_ether

    reg = target or registry
    params = MintingParameters(
        min_fid=settings.min_fid,
        max_fid=settings.max_fid,
        base_mint_price=parse_ether(settings.base_mint_price_eth),
        pro_mint_price=parse_ether(settings.pro_mint_price_eth),
        max_supply=settings.max_supply,
        paused=settings.start_paused,
        require_pro_for_discount=settings.require_pro_for_discount,
    )
    reg.ledger = MintLedger(
        owner=settings.owner_address,
        treasury=settings.treasury_address,
        oracle=settings.oracle_address,
        params=params,
    )
    reg.sessions = AuthSessionStore(
        maxsize=settings.auth_session_cache_size,
        ttl_sec=settings.auth_session_ttl_sec,
    )
    reg.neynar = NeynarClient(
        settings.neynar_api_key, settings.neynar_base_url, settings.neynar_max_rps
    )
    reg.pinata = PinataClient(
        settings.pinata_api_key, settings.pinata_secret, settings.pinata_max_rps
    )
    reg.together = TogetherClient(
        settings.together_api_key, settings.together_model, settings.together_max_rps
    )
    reg.stability = StabilityClient(settings.stability_api_key, settings.stability_max_rps)
    reg.transformer = ImageTransformer(
        provider=settings.image_provider,
        together=reg.together,
        stability=reg.stability,
        cache_size=settings.transform_cache_size,
        cache_ttl_sec=settings.transform_cache_ttl_sec,
    )
    return reg
