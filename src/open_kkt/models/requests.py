"""Request parameter models for Open API resources"""

from enum import Enum
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field


class CommandType(str, Enum):
    """Discriminator of the ``Command`` resource"""
    OPEN_SHIFT = "openShift"
    CLOSE_SHIFT = "closeShift"
    PRINT_CHECK = "printCheck"
    PRINT_PURCHASE_RETURN = "printPurchaseReturn"


class RequestParams(BaseModel):
    """Base for all signed parameter sets"""

    model_config = {
        "extra": "forbid",
    }

    def to_params(self) -> Dict[str, Any]:
        """Plain parameter map as signed and sent (None fields dropped)"""
        return self.model_dump(mode="json", exclude_none=True)


class TokenParams(RequestParams):
    """Parameters of the ``Token`` resource"""

    app_id: str = Field(..., description="app_id of the integration")
    nonce: str = Field(..., description="Single-use request identifier")


class AuthenticatedParams(TokenParams):
    """Parameters shared by every token-authenticated resource"""

    token: str = Field(..., description="Current Open API token")


class StateSystemParams(AuthenticatedParams):
    """Parameters of the ``StateSystem`` resource"""


class ShiftCommand(BaseModel):
    """Payload of shift open/close commands"""

    model_config = {
        "extra": "forbid",
    }

    report_type: str = Field(default="false", description="Print the shift report")
    author: str = Field(default="name", description="Cashier name shown on the report")


class CommandParams(AuthenticatedParams):
    """Parameters of a ``Command`` submission"""

    command: Union[Dict[str, Any], ShiftCommand] = Field(
        ..., description="Command payload"
    )
    type: CommandType = Field(..., description="Command type")


class CommandStatusParams(AuthenticatedParams):
    """Parameters of a ``Command/{id}`` lookup"""


class CommandFilter(RequestParams):
    """Filter for listing submitted commands"""

    filter_date_create_from: Optional[str] = None
    filter_date_create_to: Optional[str] = None
    filter_date_update_from: Optional[str] = None
    filter_date_update_to: Optional[str] = None
    filter_date_result_from: Optional[str] = None
    filter_date_result_to: Optional[str] = None
    page: Optional[int] = Field(default=None, ge=1)
    c_num: Optional[str] = None


class CommandListParams(CommandFilter, AuthenticatedParams):
    """Parameters of a filtered ``Command`` listing"""
