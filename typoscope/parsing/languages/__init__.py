"""
Language configurations for naming checks.

Supported languages:
- javascript.py: JavaScript (.js, .jsx)
- typescript.py: TypeScript (.ts) and TSX (.tsx)
- python.py: Python (.py)
"""

from .javascript import JAVASCRIPT_CONFIG
from .typescript import TYPESCRIPT_CONFIG, TSX_CONFIG
from .python import PYTHON_CONFIG

ALL_CONFIGS = [JAVASCRIPT_CONFIG, TYPESCRIPT_CONFIG, TSX_CONFIG, PYTHON_CONFIG]

__all__ = [
    'JAVASCRIPT_CONFIG',
    'TYPESCRIPT_CONFIG',
    'TSX_CONFIG',
    'PYTHON_CONFIG',
    'ALL_CONFIGS',
]
