"""
Pipeline orchestration for the salinity monitor
"""

from .orchestrator import PipelineOrchestrator, RunSummary

__all__ = [
    'PipelineOrchestrator',
    'RunSummary'
]
