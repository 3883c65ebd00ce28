"""AI Studio tool declarations and the request shaping stages.

- catalog.py: tool declarations and ``build_registry()``
- params_utils.py: argument normalization and validation
- selection.py: explicit vs. derived-schema operation choice
- payloads.py: SDK call arguments per operation
"""

from __future__ import annotations

__all__ = [
    "catalog",
    "params_utils",
    "selection",
    "payloads",
]
