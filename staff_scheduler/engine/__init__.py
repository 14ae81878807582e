"""Schedule generation engine."""

from .generator import GenerationResult, GenerationState, ScheduleGenerator, generate_schedule

__all__ = [
    "ScheduleGenerator",
    "GenerationResult",
    "GenerationState",
    "generate_schedule",
]
