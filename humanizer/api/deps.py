from fastapi import Request

from humanizer.services.datasets import DatasetStore
from humanizer.services.orchestrator import HumanizationOrchestrator


def get_engine(request: Request) -> HumanizationOrchestrator:
    return request.app.state.engine


def get_dataset_store(request: Request) -> DatasetStore:
    return request.app.state.dataset_store
