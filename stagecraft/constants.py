from enum import Enum
from typing import Tuple


class Stage(int, Enum):
    PREPROCESSING = 1
    FEATURE_ENGINEERING = 2
    MODEL_TRAINING = 3
    EVALUATION = 4


class NodeRole(str, Enum):
    TRANSFORM = "transform"
    SPLIT = "split"
    ROW_FILTER = "row_filter"
    FIT = "fit"
    CROSS_VALIDATION = "cross_validation"
    EVALUATE = "evaluate"


STAGE_NUMBERS: Tuple[int, ...] = tuple(stage.value for stage in Stage)
DEFAULT_STAGE = Stage.PREPROCESSING

# Which explicit roles can run in which stage
STAGE_ROLES = {
    Stage.PREPROCESSING: (NodeRole.TRANSFORM, NodeRole.SPLIT, NodeRole.ROW_FILTER),
    Stage.FEATURE_ENGINEERING: (NodeRole.TRANSFORM, NodeRole.SPLIT, NodeRole.ROW_FILTER),
    Stage.MODEL_TRAINING: (NodeRole.FIT,),
    Stage.EVALUATION: (NodeRole.CROSS_VALIDATION, NodeRole.EVALUATE),
}

# Legacy name heuristics, used only when a node has no explicit role
SPLIT_KEYWORDS: Tuple[str, ...] = ("split", "stratified")
ROW_FILTER_KEYWORDS: Tuple[str, ...] = ("outlier", "remove", "drop", "filter")
CROSS_VALIDATION_KEYWORDS: Tuple[str, ...] = ("cross", "kfold", "k_fold", "_cv", "crossval")

# Passed positionally to split callables, never as a keyword
TARGET_COLUMN_PARAM = "target_column"

# Names the script skeleton binds itself; a component with one of these names
# would be shadowed or would shadow the skeleton
RESERVED_NAMES = frozenset({
    # modules and entry point
    "argparse", "os", "sys", "traceback", "warnings", "np", "pd", "numpy", "pandas",
    "execute_pipeline", "parser", "args", "LabelEncoder",
    # execute_pipeline parameters and locals
    "data_file", "target_column", "output_file", "skip_split_warning",
    "df", "X", "y", "current_data", "model", "le", "split_performed",
    "X_train", "X_test", "y_train", "y_test", "split_frame",
    "result", "new_data", "new_test", "synced_y", "synced_train", "synced_test",
    "X_for_training", "y_for_training", "y_encoded",
    "X_for_cv", "y_for_cv", "cv_results",
    "X_eval", "y_for_eval", "eval_type", "y_pred", "y_pred_proba", "metrics",
    "key", "value", "row", "score", "e", "root", "extension", "test_file",
    # builtins the skeleton calls
    "print", "len", "list", "isinstance", "hasattr", "float", "int", "bool",
    "tuple", "Exception", "FileNotFoundError", "KeyError",
})
