"""
Matching Module

Contains the ban decision procedures, type key normalization, suppression
handling and diagnostic message templates.
"""

from .matcher import BanMatcher
from .messages import DEFAULT_REASON, constructor_message, method_call_message, standard_message
from .suppression import DEFAULT_MARKERS, ScopeStack, SuppressionIndex
from .type_keys import NULL_TYPE_KEY, normalize_type

__all__ = [
    'BanMatcher',
    'DEFAULT_MARKERS',
    'DEFAULT_REASON',
    'NULL_TYPE_KEY',
    'ScopeStack',
    'SuppressionIndex',
    'constructor_message',
    'method_call_message',
    'normalize_type',
    'standard_message',
]
