"""
ui/plain - Plain CLI Package for StreamChat

- renderer.py: View layer (Rich console operations)
- input.py: Input abstraction (prompt_toolkit wrapper)
- interface.py: Controller layer (event subscriptions)
"""

from .interface import PlainUI

__all__ = ["PlainUI"]
