"""Models module initialization"""

from open_kkt.models.requests import (
    CommandType,
    RequestParams,
    TokenParams,
    AuthenticatedParams,
    StateSystemParams,
    ShiftCommand,
    CommandParams,
    CommandStatusParams,
    CommandFilter,
    CommandListParams,
)

__all__ = [
    "CommandType",
    "RequestParams",
    "TokenParams",
    "AuthenticatedParams",
    "StateSystemParams",
    "ShiftCommand",
    "CommandParams",
    "CommandStatusParams",
    "CommandFilter",
    "CommandListParams",
]
