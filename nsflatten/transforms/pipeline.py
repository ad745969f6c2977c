"""
transforms/pipeline.py

Runs a sequence of module transforms over source text.

Each transform gets a freshly parsed module of the previous transform's
output, so transforms never see each other's buffered edits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ..interfaces import ModuleTransform
from ..syntax.parser import load_module

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    source: str
    output: str
    step_results: List[Tuple[str, Any]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.source != self.output


class TransformPipeline:
    """An ordered list of transforms applied one after another."""

    def __init__(self, transforms: Optional[List[ModuleTransform]] = None):
        self.transforms: List[ModuleTransform] = list(transforms or [])

    def add(self, transform: ModuleTransform) -> "TransformPipeline":
        self.transforms.append(transform)
        return self

    def __len__(self) -> int:
        return len(self.transforms)

    def run(self, source: str) -> PipelineResult:
        """
        Apply every transform in order.

        Raises:
            TransformError: If the source does not parse or an edit conflicts.
        """
        result = PipelineResult(source=source, output=source)
        current = source

        for transform in self.transforms:
            name = type(transform).__name__
            module = load_module(current)
            outcome = transform.apply(module)
            current = module.render()
            result.step_results.append((name, outcome))
            logger.debug("%s applied", name)

        result.output = current
        return result
