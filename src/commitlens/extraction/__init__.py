"""Loading, normalization and aggregation of per-line history logs."""

from commitlens.extraction.aggregator import CommitAggregator
from commitlens.extraction.loader import Dataset, build_dataset, load_dataset, load_dataset_async, read_csv
from commitlens.extraction.normalizer import LineRecordNormalizer, NormalizationResult, resolve_columns

__all__ = [
    "CommitAggregator",
    "Dataset",
    "LineRecordNormalizer",
    "NormalizationResult",
    "build_dataset",
    "load_dataset",
    "load_dataset_async",
    "read_csv",
    "resolve_columns",
]
