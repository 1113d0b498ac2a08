from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

FeedKind = Literal["trending", "new"]
FEED_KINDS: tuple[str, ...] = ("trending", "new")


class TokenSummary(BaseModel):
    """Normalized token row served by the discovery feed, whatever tier produced it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    symbol: str
    market_cap: float = Field(0.0, ge=0, alias="marketCap")
    price: float = Field(0.0, ge=0)
    volume_24h: float = Field(0.0, ge=0, alias="volume24h")
    last_activity_time: str = Field(..., alias="lastActivityTime")
    reply_count: int = Field(0, ge=0, alias="replyCount")
    tags: List[str] = Field(default_factory=list)
    is_new: bool = Field(False, alias="isNew")
    image_url: str = Field(..., alias="imageUrl")

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        # tags behave as a set; first occurrence keeps its position
        return list(dict.fromkeys(value))


class TokenFeedResponse(BaseModel):
    success: bool = True
    data: List[TokenSummary]


class CreateTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=50)
    symbol: str = Field(..., min_length=1, max_length=10)
    decimals: int = Field(9, ge=0, le=9)
    wallet_address: str = Field(..., min_length=1, alias="walletAddress")
    signature: str = Field(..., min_length=1)


class CreatedToken(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token_id: str = Field(..., alias="tokenId")
    name: str
    symbol: str
    decimals: int
    transaction_signature: str = Field(..., alias="transactionSignature")


class CreateTokenResponse(BaseModel):
    success: bool = True
    message: str = "Token created successfully"
    data: CreatedToken


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
