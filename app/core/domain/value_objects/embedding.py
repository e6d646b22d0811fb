from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class EmbeddingVector:
    """Value object representing an embedding vector"""
    values: List[float]
    model_name: str
    dimensions: int

    def __post_init__(self):
        if len(self.values) != self.dimensions:
            raise ValueError(f"Expected {self.dimensions} dimensions, got {len(self.values)}")
