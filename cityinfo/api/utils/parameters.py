"""Annotated path parameter types shared by the resource routes."""

from typing import Annotated

from fastapi import Path

from cityinfo.core.constants import MAX_ID, MIN_ID

# Values outside the 32-bit range fail validation with a 400
ResourceId = Annotated[int, Path(ge=MIN_ID, le=MAX_ID)]
