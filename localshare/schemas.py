"""Pydantic schemas for the LocalShare server API."""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# The server emits RFC 3339 timestamps with nanosecond precision.
_EXCESS_FRACTION = re.compile(r'(\.\d{6})\d+')


class ServerConfig(BaseModel):
    """Capabilities advertised by GET /api/config."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pin_protected: bool = Field(alias='pinProtected')
    admin_required: bool = Field(alias='adminRequired')
    max_file_size: int = Field(alias='maxFileSize', ge=0)

    @property
    def max_file_size_mb(self) -> str:
        return f"{self.max_file_size / (1024 * 1024):.0f}"


class FileEntry(BaseModel):
    """One entry of the remote file listing."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    size: int
    modified_time: datetime = Field(alias='modifiedTime')
    is_dir: bool = Field(default=False, alias='isDir')

    @field_validator('modified_time', mode='before')
    @classmethod
    def _trim_fraction(cls, value):
        if isinstance(value, str):
            return _EXCESS_FRACTION.sub(r'\1', value)
        return value


class FilesListResponse(BaseModel):
    """Response model for GET /api/files."""
    files: Optional[List[FileEntry]] = None


class ErrorBody(BaseModel):
    """Optional error payload of non-2xx responses."""
    error: Optional[str] = None


class PinRequest(BaseModel):
    """Request model for PIN verification."""
    pin: str


class AdminLoginRequest(BaseModel):
    """Request model for admin login."""
    username: str
    password: str
