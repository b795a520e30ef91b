from fastapi import APIRouter

from humanizer.api.v1 import analyze, datasets, humanize, training

router = APIRouter()
router.include_router(humanize.router, tags=["humanize"])
router.include_router(analyze.router, tags=["analyze"])
router.include_router(datasets.router, tags=["datasets"])
router.include_router(training.router, tags=["training"])
