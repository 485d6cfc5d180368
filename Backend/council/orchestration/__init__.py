# council/orchestration/__init__.py
"""
Pipeline orchestration: stage fan-out, stage runner, run artifacts, run registry.
"""
from .fan_out import run_stage, successful
from .runner import CouncilRunner
from .state import RunRegistry

__all__ = ["run_stage", "successful", "CouncilRunner", "RunRegistry"]
