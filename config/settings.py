from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # HTTP server
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_debug: bool = False
    public_base_url: str = "https://your-domain.com"
    cors_origins: str = (
        "https://cyber-profile-seven.vercel.app,"
        "http://localhost:3000,"
        "https://cyberprofile-production.up.railway.app"
    )
    static_dir: str = "public"

    # Neynar (Farcaster identity)
    neynar_api_key: str = ""
    neynar_base_url: str = "https://api.neynar.com/v2/farcaster"
    neynar_max_rps: float = 5.0

    # Together.ai (SDXL generation)
    together_api_key: str = ""
    together_model: str = "stabilityai/stable-diffusion-xl-base-1.0"
    together_max_rps: float = 2.0

    # Stability AI (image-to-image, alternative provider)
    stability_api_key: str = ""
    stability_max_rps: float = 2.0

    # "together" or "stability"
    image_provider: str = "together"

    # Pinata (IPFS pinning)
    pinata_api_key: str = ""
    pinata_secret: str = ""
    pinata_max_rps: float = 3.0

    # Contract / roles
    contract_address: str = ""
    owner_address: str = "0x00000000000000000000000000000000000000a1"
    treasury_address: str = "0x00000000000000000000000000000000000000a2"
    oracle_address: str = "0x00000000000000000000000000000000000000a3"
    oracle_api_key: str = ""  # X-Oracle-Key header for pro-status sync

    # Initial minting parameters (prices in ETH)
    min_fid: int = 1
    max_fid: int = 100000
    base_mint_price_eth: str = "0.002"
    pro_mint_price_eth: str = "0.001"
    max_supply: int = 10000
    require_pro_for_discount: bool = True
    start_paused: bool = False

    # Bounded caches
    transform_cache_size: int = 5000
    transform_cache_ttl_sec: int = 6 * 3600
    auth_session_cache_size: int = 10000
    auth_session_ttl_sec: int = 600  # pending sign-in challenges
    auth_token_ttl_hours: int = 24

    # Admin login (owner role) + JWT signing
    admin_user: str = "admin"
    admin_password: str = ""
    jwt_secret: str = ""


settings = Settings()
