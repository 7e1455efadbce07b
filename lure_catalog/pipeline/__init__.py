"""
Ingestion pipeline stages.

Modules:
    variants     - expand_variants (color x weight, image fallback)
    images       - ImagePipeline (download, WebP transcode, upload)
    orchestrator - PipelineOrchestrator, RunSummary, print_summary
    deploy       - DeployHook (site rebuild trigger)
"""

from .deploy import DeployHook
from .images import ImagePipeline, image_key, main_image_key
from .orchestrator import PipelineOrchestrator, ProductResult, RunSummary, print_summary
from .variants import expand_variants, resolve_image_source, resolve_weights

__all__ = [
    'DeployHook',
    'ImagePipeline',
    'PipelineOrchestrator',
    'ProductResult',
    'RunSummary',
    'expand_variants',
    'image_key',
    'main_image_key',
    'print_summary',
    'resolve_image_source',
    'resolve_weights',
]
