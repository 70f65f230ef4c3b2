# =============================================================================
# File: base_response.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from pydantic import BaseModel, Field


class BaseResponse(BaseModel):
    success: bool = Field(True, description="Whether the call completed without error.")
    message: str = Field("", description="Status or error message.")
    time_taken: float = Field(0.0, description="Wall-clock seconds spent on the call.")
