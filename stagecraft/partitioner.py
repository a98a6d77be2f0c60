from typing import Dict, List, Sequence

from .constants import DEFAULT_STAGE, STAGE_NUMBERS
from .schemas import PipelineNode


def effective_stage(stage: int) -> int:
    """Stage a node runs in; anything outside 1..4 runs in stage 1."""
    if stage in STAGE_NUMBERS:
        return stage
    return DEFAULT_STAGE.value


def partition(nodes: Sequence[PipelineNode]) -> Dict[int, List[PipelineNode]]:
    """
    Group nodes into the four stage buckets.

    Every stage key is present even when its bucket is empty, and nodes keep
    their relative input order inside a bucket.
    """
    stages: Dict[int, List[PipelineNode]] = {number: [] for number in STAGE_NUMBERS}
    for node in nodes:
        stages[effective_stage(node.stage)].append(node)
    return stages
