"""Pydantic models for NFT metadata pinned to IPFS."""

from typing import Any

from pydantic import BaseModel


class NftAttribute(BaseModel):
    trait_type: str
    value: Any


class NftMetadata(BaseModel):
    """ERC-721 metadata JSON."""

    name: str
    description: str = ""
    image: str
    attributes: list[NftAttribute] = []


def build_profile_metadata(
    *, fid: int, username: str, display_name: str, image_uri: str
) -> NftMetadata:
    return NftMetadata(
        name=f"CyberProfile #{fid}",
        description=f"Cyberpunk transformation of @{username}'s Farcaster profile",
        image=image_uri,
        attributes=[
            NftAttribute(trait_type="FID", value=fid),
            NftAttribute(trait_type="Username", value=username),
            NftAttribute(trait_type="Display Name", value=display_name),
            NftAttribute(trait_type="Style", value="Cyberpunk"),
        ],
    )
