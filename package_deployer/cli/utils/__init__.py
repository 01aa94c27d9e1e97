"""CLI utility functions"""

from .output import (
    console,
    format_session_result,
    format_repository_table,
    format_repository_tree,
    print_error,
    print_warning,
    print_info,
    print_success,
)
from .interactive import MainMenu

__all__ = [
    # Output utilities
    'console',
    'format_session_result',
    'format_repository_table',
    'format_repository_tree',
    'print_error',
    'print_warning',
    'print_info',
    'print_success',

    # Interactive utilities
    'MainMenu',
]
