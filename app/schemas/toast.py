from typing import Literal

from pydantic import BaseModel


class Toast(BaseModel):
    message: str
    type: Literal["success", "error"] = "success"
