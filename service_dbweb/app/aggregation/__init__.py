from .aggregator import StatusAggregator, merge_results

__all__ = ["StatusAggregator", "merge_results"]
