from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from humanizer.schemas.training import HardwareOut, TrainingEstimateRequest, TrainingEstimateResponse
from humanizer.services.training import (
    custom_config,
    estimate_memory_gb,
    estimate_training_hours,
    get_hardware_requirements,
    validate_config,
)

router = APIRouter()


@router.post("/training/estimate", response_model=TrainingEstimateResponse)
async def estimate_training(body: TrainingEstimateRequest) -> TrainingEstimateResponse:
    try:
        config = custom_config(body.preset, **body.overrides)
    except TypeError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    errors = validate_config(config)
    if config.batch_size <= 0:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="; ".join(errors))

    hardware = get_hardware_requirements(body.preset)
    return TrainingEstimateResponse(
        preset=body.preset,
        config=config.to_dict(),
        training_hours=estimate_training_hours(config, body.dataset_size),
        memory_gb=estimate_memory_gb(config),
        hardware=HardwareOut(
            gpu_memory_gb=hardware.gpu_memory_gb,
            system_memory_gb=hardware.system_memory_gb,
            cpu_cores=hardware.cpu_cores,
            storage_gb=hardware.storage_gb,
            recommended_gpu=list(hardware.recommended_gpu),
        ),
        validation_errors=errors,
    )
