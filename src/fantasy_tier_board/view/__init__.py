from fantasy_tier_board.view.filters import compute_visibility, visibility_map
from fantasy_tier_board.view.materializer import IncrementalMaterializer, MaterializerState

__all__ = ["IncrementalMaterializer", "MaterializerState", "compute_visibility", "visibility_map"]
