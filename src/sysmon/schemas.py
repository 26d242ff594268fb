"""Pydantic response schemas for the HTTP API."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Schema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class UsageSchema(_Schema):
    """CPU and memory usage."""

    cpu_percent: int = Field(alias="cpuPercent")
    memory_total_gb: float = Field(alias="memoryTotalGB")
    memory_used_gb: float = Field(alias="memoryUsedGB")
    memory_free_gb: float = Field(alias="memoryFreeGB")
    memory_used_percent: int = Field(alias="memoryUsedPercent")
    sampled_at: datetime = Field(alias="sampledAt")


class ProcessSchema(_Schema):
    """One entry of the process list."""

    id: int
    name: str
    pid: str
    cpu_percent: float = Field(alias="cpuPercent")
    memory_mb: float = Field(alias="memoryMB")
    status: str


class SystemInfoSchema(_Schema):
    """Static host description."""

    platform: str
    architecture: str
    hostname: str
    uptime: int
    cpu_cores: int = Field(alias="cpuCores")
    cpu_model: str = Field(alias="cpuModel")
    total_memory: float = Field(alias="totalMemory")


class UsageResponse(BaseModel):
    success: bool = True
    data: UsageSchema
    timestamp: datetime = Field(default_factory=utc_now)


class ProcessesResponse(BaseModel):
    success: bool = True
    data: list[ProcessSchema]
    count: int
    timestamp: datetime = Field(default_factory=utc_now)


class SystemInfoResponse(BaseModel):
    success: bool = True
    data: SystemInfoSchema
    timestamp: datetime = Field(default_factory=utc_now)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: datetime = Field(default_factory=utc_now)


class ErrorResponse(BaseModel):
    """Failure envelope."""

    success: bool = False
    error: str
    message: str | None = None
