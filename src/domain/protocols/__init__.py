"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance
(PEP 544 structural subtyping).

Usage:
    from src.domain.protocols import CategoryRepository, LoggerProtocol
"""

from src.domain.protocols.category_repository import CategoryRepository
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.token_generation_protocol import TokenGenerationProtocol

__all__ = [
    "CategoryRepository",
    "LoggerProtocol",
    "TokenGenerationProtocol",
]
