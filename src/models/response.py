"""Response bodies produced by the relay itself."""

from pydantic import BaseModel


class Acknowledgement(BaseModel):
    """Body returned with 202 when the ticket is handed to the background dispatcher."""

    status: str = "processing"
    message: str = "Request received"
