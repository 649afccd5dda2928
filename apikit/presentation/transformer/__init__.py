"""Response transformation: bindings and the transformer factory.

Usage:
    from apikit.presentation.transformer import Transformer, TransformerFactory
"""

from apikit.infrastructure.transformer.transformer import Transformer
from apikit.presentation.transformer.binding import Binding
from apikit.presentation.transformer.factory import TransformerFactory

__all__ = ["Binding", "Transformer", "TransformerFactory"]
