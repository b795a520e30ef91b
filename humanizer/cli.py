from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
from pathlib import Path

from humanizer.core.config import get_settings
from humanizer.core.logging import configure_logging
from humanizer.services.analyzer import analyze
from humanizer.services.backends import ModelLoadConfig
from humanizer.services.orchestrator import HumanizationOrchestrator
from humanizer.services.scoring import estimate
from humanizer.services.training import (
    PRESETS,
    estimate_memory_gb,
    estimate_training_hours,
    get_hardware_requirements,
    get_preset,
    validate_config,
)
from humanizer.services.types import TARGET_STYLES, HumanizationRequest


def _add_text_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", default=None, help="Single text input.")
    parser.add_argument("--input-file", default=None, help="Read the whole file as one text.")


def _load_text(text: str | None, input_file: str | None) -> str:
    if text and input_file:
        raise ValueError("Use either --text or --input-file, not both.")
    if not text and not input_file:
        raise ValueError("Provide --text or --input-file.")
    if text:
        return text
    return Path(input_file).read_text(encoding="utf-8")


async def _humanize(args: argparse.Namespace) -> dict:
    settings = get_settings()
    engine = HumanizationOrchestrator()
    engine.initialize_model(
        ModelLoadConfig(
            model_path=settings.generation_model_path,
            device=settings.generation_device,
            seed=args.seed if args.seed is not None else settings.random_seed,
        )
    )
    result = await engine.humanize(
        HumanizationRequest(
            input_text=_load_text(args.text, args.input_file),
            target_style=args.style,
            target_complexity=args.complexity,
            selected_patterns=args.patterns,
            use_cache=False,
        )
    )
    return dataclasses.asdict(result)


async def _detect(args: argparse.Namespace) -> dict:
    settings = get_settings()
    engine = HumanizationOrchestrator()
    model_id = await engine.detector.load_model(settings.detector_model_path, args.kind or settings.detector_model_kind)
    result = engine.detect(_load_text(args.text, args.input_file))
    return {"model_id": model_id, **dataclasses.asdict(result)}


def _analyze(args: argparse.Namespace) -> dict:
    text = _load_text(args.text, args.input_file)
    features = analyze(text)
    payload = dataclasses.asdict(features)
    payload["detected_patterns"] = sorted(features.detected_patterns)
    payload["detection_score"] = estimate(text)
    return payload


def _estimate(args: argparse.Namespace) -> dict:
    config = get_preset(args.preset)
    if args.dataset_id:
        config = dataclasses.replace(config, dataset_id=args.dataset_id)
    if args.device:
        config = dataclasses.replace(config, device=args.device)
    return {
        "preset": args.preset,
        "training_hours": estimate_training_hours(config, args.dataset_size),
        "memory_gb": estimate_memory_gb(config),
        "hardware": dataclasses.asdict(get_hardware_requirements(args.preset)),
        "validation_errors": validate_config(config),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="humanizer",
        description="Heuristic text humanization and AI-text detection.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_humanize = sub.add_parser("humanize", help="Rewrite text so it reads as human-written.")
    _add_text_args(p_humanize)
    p_humanize.add_argument("--style", choices=sorted(TARGET_STYLES), default=None)
    p_humanize.add_argument("--complexity", type=float, default=None, help="Target complexity, 1-10.")
    p_humanize.add_argument(
        "--pattern",
        dest="patterns",
        action="append",
        default=None,
        help="Explicit pattern name; repeat to apply several. Skips automatic selection.",
    )
    p_humanize.add_argument("--seed", type=int, default=None)

    p_detect = sub.add_parser("detect", help="Score how likely a text is machine-generated.")
    _add_text_args(p_detect)
    p_detect.add_argument("--kind", choices=["statistical", "neural", "hybrid"], default=None)

    p_analyze = sub.add_parser("analyze", help="Print linguistic features of a text.")
    _add_text_args(p_analyze)

    p_estimate = sub.add_parser("estimate", help="Estimate fine-tuning time and memory for a preset.")
    p_estimate.add_argument("--preset", choices=sorted(PRESETS), default="lora_lightweight")
    p_estimate.add_argument("--dataset-size", type=int, required=True)
    p_estimate.add_argument("--dataset-id", default="")
    p_estimate.add_argument("--device", choices=["cuda", "cpu"], default=None)

    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    if args.command == "humanize":
        result = asyncio.run(_humanize(args))
    elif args.command == "detect":
        result = asyncio.run(_detect(args))
    elif args.command == "analyze":
        result = _analyze(args)
    else:
        result = _estimate(args)
    print(json.dumps(result, ensure_ascii=True, indent=2))


if __name__ == "__main__":
    main()
