import dataclasses

import pytest

from humanizer.services.training import (
    PRESETS,
    custom_config,
    estimate_memory_gb,
    estimate_training_hours,
    get_hardware_requirements,
    get_preset,
    validate_config,
)


@pytest.mark.parametrize(
    ("preset", "dataset_size", "device", "expected"),
    [
        ("lora_lightweight", 200_000, "cuda", 45),
        ("lora_lightweight", 40_000, "cpu", 30),
        ("full_fine_tune", 10_000, "cuda", 45),
        ("qlora_optimized", 0, "cuda", 0),
    ],
)
def test_estimate_training_hours(preset, dataset_size, device, expected):
    config = dataclasses.replace(get_preset(preset), device=device)

    assert estimate_training_hours(config, dataset_size) == expected


@pytest.mark.parametrize(
    ("preset", "expected"),
    [("lora_lightweight", 8.0), ("qlora_optimized", 4.0), ("full_fine_tune", 32.0)],
)
def test_estimate_memory_gb(preset, expected):
    assert estimate_memory_gb(get_preset(preset)) == expected


def test_presets_need_dataset_id():
    for name in PRESETS:
        assert validate_config(get_preset(name)) == ["Dataset ID is required"]
        assert validate_config(custom_config(name, dataset_id="d1")) == []


def test_validate_config_collects_errors():
    config = custom_config(
        "qlora_optimized",
        dataset_id="d1",
        learning_rate=2.0,
        num_epochs=0,
        quantization_bits=3,
        target_modules=[],
        max_seq_length=5000,
        train_test_split=1.0,
    )

    assert validate_config(config) == [
        "Learning rate must be between 0 and 1",
        "Number of epochs must be between 1 and 100",
        "Target modules must be specified for LoRA training",
        "QLoRA quantization must be 4 or 8 bits",
        "Max sequence length must be between 1 and 4096",
        "Train/test split must be between 0 and 1",
    ]


def test_unknown_preset():
    with pytest.raises(ValueError):
        get_preset("mystery")
    with pytest.raises(ValueError):
        get_hardware_requirements("mystery")


def test_hardware_requirements():
    hardware = get_hardware_requirements("full_fine_tune")

    assert hardware.gpu_memory_gb == 24
    assert "A100" in hardware.recommended_gpu
