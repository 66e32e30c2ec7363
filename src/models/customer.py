"""Commerce backend snapshots used to enrich ticket descriptions."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CustomerProfile(BaseModel):
    """Customer record returned by the commerce customer search."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: Optional[str] = None
    firstname: str = ""
    lastname: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


class OrderRecord(BaseModel):
    """One order from the customer's recent history."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    increment_id: str
    grand_total: float = 0.0
    status: str = ""
    created_at: str = ""
    order_currency_code: Optional[str] = None

    def formatted_total(self) -> str:
        total = f"{self.grand_total:.2f}"
        return f"{total} {self.order_currency_code}" if self.order_currency_code else total
