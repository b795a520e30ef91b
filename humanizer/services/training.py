"""Fine-tuning presets and rough cost estimates.

Nothing here trains a model. The estimates size a job before it is queued
elsewhere.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Literal

from humanizer.utils.text import round_half_up

ModelType = Literal["lora", "qlora", "full_fine_tune"]

_LORA_TARGET_MODULES = ("q_proj", "k_proj", "v_proj", "o_proj", "gate_proj", "up_proj", "down_proj")
_BASE_MODEL = "phi-3-mini-3.8b-gguf-q4_k_m"
_BASE_MEMORY_GB = 8.0
_BYTES_PER_GB = 1024**3


@dataclass(frozen=True)
class TrainingConfig:
    model_name: str
    base_model: str
    model_type: ModelType
    learning_rate: float
    batch_size: int
    num_epochs: int
    max_seq_length: int = 512
    dataset_id: str = ""
    warmup_steps: int = 100
    weight_decay: float = 0.01
    gradient_clip_val: float = 1.0
    lora_r: int | None = None
    lora_alpha: int | None = None
    lora_dropout: float | None = None
    target_modules: tuple[str, ...] = ()
    quantization_bits: int | None = None
    train_test_split: float = 0.9
    device: str = "cuda"
    mixed_precision: bool = True
    gradient_accumulation_steps: int = 1
    eval_steps: int = 500
    save_steps: int = 1000
    logging_steps: int = 100
    early_stopping: bool = True
    patience: int = 3
    min_delta: float = 0.001

    def to_dict(self) -> dict[str, Any]:
        payload = dataclasses.asdict(self)
        payload["target_modules"] = list(self.target_modules)
        return payload


@dataclass(frozen=True)
class HardwareRequirements:
    gpu_memory_gb: int
    system_memory_gb: int
    cpu_cores: int
    storage_gb: int
    recommended_gpu: tuple[str, ...] = field(default_factory=tuple)


PRESETS: dict[str, TrainingConfig] = {
    "lora_lightweight": TrainingConfig(
        model_name="phi-3-mini-humanizer-lora-light",
        base_model=_BASE_MODEL,
        model_type="lora",
        learning_rate=2e-4,
        batch_size=4,
        num_epochs=3,
        warmup_steps=100,
        weight_decay=0.01,
        gradient_clip_val=1.0,
        lora_r=16,
        lora_alpha=32,
        lora_dropout=0.1,
        target_modules=_LORA_TARGET_MODULES,
        gradient_accumulation_steps=4,
        eval_steps=500,
        save_steps=1000,
        logging_steps=100,
        patience=3,
        min_delta=0.001,
    ),
    "qlora_optimized": TrainingConfig(
        model_name="phi-3-mini-humanizer-qlora-optimized",
        base_model=_BASE_MODEL,
        model_type="qlora",
        learning_rate=1e-4,
        batch_size=8,
        num_epochs=5,
        warmup_steps=200,
        weight_decay=0.05,
        gradient_clip_val=0.5,
        lora_r=64,
        lora_alpha=16,
        lora_dropout=0.05,
        target_modules=_LORA_TARGET_MODULES,
        quantization_bits=4,
        gradient_accumulation_steps=2,
        eval_steps=250,
        save_steps=500,
        logging_steps=50,
        patience=5,
        min_delta=0.0005,
    ),
    "full_fine_tune": TrainingConfig(
        model_name="phi-3-mini-humanizer-full",
        base_model=_BASE_MODEL,
        model_type="full_fine_tune",
        learning_rate=5e-5,
        batch_size=2,
        num_epochs=10,
        warmup_steps=500,
        weight_decay=0.1,
        gradient_clip_val=1.0,
        gradient_accumulation_steps=8,
        eval_steps=1000,
        save_steps=2000,
        logging_steps=100,
        patience=7,
        min_delta=0.001,
    ),
}

HARDWARE_REQUIREMENTS: dict[str, HardwareRequirements] = {
    "lora_lightweight": HardwareRequirements(8, 16, 4, 50, ("RTX 3060", "RTX 4060", "GTX 1660 Super")),
    "qlora_optimized": HardwareRequirements(12, 32, 6, 75, ("RTX 3060 Ti", "RTX 4070", "RTX 3080")),
    "full_fine_tune": HardwareRequirements(24, 64, 8, 150, ("RTX 3090", "RTX 4090", "A100", "H100")),
}

_TIME_MULTIPLIERS = {"full_fine_tune": 3.0, "qlora": 1.5}
_MEMORY_MULTIPLIERS = {"full_fine_tune": 4.0, "qlora": 0.5}


def get_preset(name: str) -> TrainingConfig:
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown training preset: {name}") from None


def get_hardware_requirements(name: str) -> HardwareRequirements:
    try:
        return HARDWARE_REQUIREMENTS[name]
    except KeyError:
        raise ValueError(f"Unknown training preset: {name}") from None


def custom_config(base: str = "lora_lightweight", **overrides: Any) -> TrainingConfig:
    if "target_modules" in overrides and overrides["target_modules"] is not None:
        overrides["target_modules"] = tuple(overrides["target_modules"])
    return dataclasses.replace(get_preset(base), **overrides)


def validate_config(config: TrainingConfig) -> list[str]:
    errors: list[str] = []
    if not config.model_name:
        errors.append("Model name is required")
    if not config.base_model:
        errors.append("Base model is required")
    if not config.dataset_id:
        errors.append("Dataset ID is required")
    if config.learning_rate <= 0 or config.learning_rate > 1:
        errors.append("Learning rate must be between 0 and 1")
    if config.batch_size <= 0:
        errors.append("Batch size must be positive")
    if config.num_epochs <= 0 or config.num_epochs > 100:
        errors.append("Number of epochs must be between 1 and 100")

    if config.model_type in {"lora", "qlora"}:
        if not config.lora_r or config.lora_r <= 0:
            errors.append("LoRA rank must be positive")
        if not config.lora_alpha or config.lora_alpha <= 0:
            errors.append("LoRA alpha must be positive")
        if not config.target_modules:
            errors.append("Target modules must be specified for LoRA training")
    if config.model_type == "qlora" and config.quantization_bits not in (4, 8):
        errors.append("QLoRA quantization must be 4 or 8 bits")

    if config.max_seq_length <= 0 or config.max_seq_length > 4096:
        errors.append("Max sequence length must be between 1 and 4096")
    if config.train_test_split <= 0 or config.train_test_split >= 1:
        errors.append("Train/test split must be between 0 and 1")
    return errors


def estimate_training_hours(config: TrainingConfig, dataset_size: int) -> int:
    if config.batch_size <= 0:
        raise ValueError("Batch size must be positive")
    per_epoch = (dataset_size / config.batch_size) * 0.001
    complexity = _TIME_MULTIPLIERS.get(config.model_type, 1.0)
    hardware = 0.3 if config.device == "cuda" else 1.0
    return int(round_half_up(per_epoch * config.num_epochs * complexity * hardware))


def estimate_memory_gb(config: TrainingConfig) -> float:
    memory = _BASE_MEMORY_GB * _MEMORY_MULTIPLIERS.get(config.model_type, 1.0)
    memory += (config.batch_size * config.max_seq_length * 4) / _BYTES_PER_GB
    return round_half_up(memory, 2)
