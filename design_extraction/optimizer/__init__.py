"""
Prioritized, budget-constrained extraction of design nodes.

The optimizer ranks nodes, drops the least important ones when the tree is
larger than the node budget and extracts the rest in batches with caching,
retries and fallbacks.
"""

from design_extraction.optimizer.budget import BudgetFilter, FilterResult, stratified_sample
from design_extraction.optimizer.cache import CacheEntry, ResultCache
from design_extraction.optimizer.optimizer import ExtractionPerformanceOptimizer, create_optimizer
from design_extraction.optimizer.prioritizer import NodePrioritizer
from design_extraction.optimizer.processor import NodeProcessor, simplified_record
from design_extraction.optimizer.recommendations import RecommendationEngine
from design_extraction.optimizer.scheduler import BatchScheduler, create_batches

__all__ = [
    "BatchScheduler",
    "BudgetFilter",
    "CacheEntry",
    "ExtractionPerformanceOptimizer",
    "FilterResult",
    "NodePrioritizer",
    "NodeProcessor",
    "RecommendationEngine",
    "ResultCache",
    "create_batches",
    "create_optimizer",
    "simplified_record",
    "stratified_sample",
]
