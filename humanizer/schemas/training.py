from typing import Any

from pydantic import BaseModel, Field


class TrainingEstimateRequest(BaseModel):
    preset: str = Field(default="lora_lightweight", pattern="^(lora_lightweight|qlora_optimized|full_fine_tune)$")
    dataset_size: int = Field(ge=0)
    overrides: dict[str, Any] = Field(default_factory=dict)


class HardwareOut(BaseModel):
    gpu_memory_gb: int
    system_memory_gb: int
    cpu_cores: int
    storage_gb: int
    recommended_gpu: list[str]


class TrainingEstimateResponse(BaseModel):
    preset: str
    config: dict[str, Any]
    training_hours: int
    memory_gb: float
    hardware: HardwareOut
    validation_errors: list[str]
