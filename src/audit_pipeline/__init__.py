from .pipeline import (
    AuditState,
    PipelineStage,
    StageOrderError,
    run_audit,
    run_from_config,
)

__all__ = [
    "AuditState",
    "PipelineStage",
    "StageOrderError",
    "run_audit",
    "run_from_config",
]
