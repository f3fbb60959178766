"""Run orchestration for HOOT MIND."""
from .pipeline import MindPipeline, PipelineResult

__all__ = ["MindPipeline", "PipelineResult"]
