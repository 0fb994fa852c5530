"""统一的健康检查类型定义。

所有外部依赖的健康检查都使用这些类型，确保类型安全和一致性。
"""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """健康检查状态枚举。"""

    OK = "ok"
    ERROR = "error"


class ContentSourceHealthResult(BaseModel):
    """内容源健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    endpoint: str = Field(..., description="内容源 API 地址")
    latency_ms: int | None = Field(None, description="延迟（毫秒）", ge=0)
    master_ref: str | None = Field(None, description="当前 master ref")
    error: str | None = Field(None, description="错误信息")

    def to_dict(self) -> dict[str, str | int | None]:
        """转换为字典（用于 API 响应）。"""
        return self.model_dump(mode="json", exclude_none=False)
