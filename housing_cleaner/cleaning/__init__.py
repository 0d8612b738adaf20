"""Cleaning module - Sale record normalization, imputation, splitting, deduplication."""

from .deduplicator import DuplicateDetector, DuplicateGroup, DuplicateResult, remove_duplicates
from .imputer import AddressImputer
from .normalizer import CategoricalNormalizer, DateNormalizer, PriceNormalizer
from .pipeline import CleaningPipeline, CleaningStep, create_housing_pipeline
from .pruner import ColumnPruner
from .report import CleaningReport, RecordIssue, TableState, format_report
from .splitter import AddressSplitter, join_property_address, split_owner_address, split_property_address

__all__ = [
    "CleaningPipeline",
    "CleaningStep",
    "create_housing_pipeline",
    "CleaningReport",
    "RecordIssue",
    "TableState",
    "format_report",
    "DateNormalizer",
    "CategoricalNormalizer",
    "PriceNormalizer",
    "AddressImputer",
    "AddressSplitter",
    "split_property_address",
    "split_owner_address",
    "join_property_address",
    "DuplicateDetector",
    "DuplicateGroup",
    "DuplicateResult",
    "remove_duplicates",
    "ColumnPruner",
]
