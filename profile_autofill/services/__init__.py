"""Service exports."""

from .descriptor_builder import build_descriptor, build_descriptors, parse_accept_attribute
from .pattern_library import PatternCategory, PatternLibrary, PatternRule, get_pattern_library
from .profile_mapper import profile_value_for, to_stored_profile, validate_profile
from .profile_merger import merge_profiles
from .text_cleaner import clean_fragment, normalize_label

__all__ = [
    "build_descriptor",
    "build_descriptors",
    "parse_accept_attribute",
    "PatternCategory",
    "PatternLibrary",
    "PatternRule",
    "get_pattern_library",
    "profile_value_for",
    "to_stored_profile",
    "validate_profile",
    "merge_profiles",
    "clean_fragment",
    "normalize_label",
]
