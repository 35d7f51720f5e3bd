"""
Intent interface models — name plus the parameters a confirmation screen expects.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict


class IntentParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: bool = False
    description: Optional[str] = None


class IntentDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    title: str = ""
    risk: str = "low"  # "low" | "medium" | "high"
    implicit_flow: bool = False  # may be granted to an implicit session
    parameters: dict[str, IntentParameter] = {}

    def required_parameters(self) -> list[str]:
        return [name for name, param in self.parameters.items() if param.required]
