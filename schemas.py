from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(ge=1)
    image: Optional[str] = None


class CheckoutRequest(BaseModel):
    # presence of email is checked before the rest of the body is validated
    email: Optional[str] = None
    items: list[CartItem]


class CheckoutSessionResponse(BaseModel):
    id: str
    url: str


class StatusResponse(BaseModel):
    status: Literal["success", "failed", "cancelled"]
