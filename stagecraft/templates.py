"""
Text skeleton of generated pipeline scripts.

Placeholders use ``string.Template`` syntax because the emitted Python is
full of braces. Node blocks are already indented for the body of
``execute_pipeline``.
"""

from string import Template

EXIT_GENERIC_FAILURE = 1
EXIT_FILE_NOT_FOUND = 3
EXIT_MISSING_COLUMN = 4

HEADER = Template(r'''#!/usr/bin/env python3
"""
Auto-generated Pipeline Script
Generated at: $generated_at
Version: $version
Total Components: $node_count
"""

import argparse
import os
import sys
import traceback
import warnings

import numpy as np
import pandas as pd

warnings.filterwarnings('ignore', category=FutureWarning)

# ============================================================
# COMPONENT FUNCTIONS
# ============================================================

$component_code

# ============================================================
# PIPELINE EXECUTION
# ============================================================

def execute_pipeline(data_file, target_column='target', output_file='output.csv', skip_split_warning=False):
    """Execute the complete pipeline"""

    print("=" * 60)
    print("PIPELINE EXECUTION")
    print("=" * 60)

    # Load data
    print("\n[LOADING DATA]")
    df = pd.read_csv(data_file)
    print(f"✓ Loaded {len(df)} samples")
    print(f"✓ Columns: {list(df.columns)}")

    # Separate features and target
    if target_column in df.columns:
        X = df.drop(columns=[target_column])
        y = df[target_column]
        print(f"✓ Target column: {target_column}")
    else:
        X = df
        y = None
        print("⚠ No target column found, processing features only")

    # Initialize pipeline variables
    current_data = X
    model = None
    le = None
    X_train, X_test, y_train, y_test = None, None, None, None
    split_performed = False

''')

STAGE_BANNER = Template(r'''    # ============================================================
    # STAGE $stage
    # ============================================================
    print("\n[STAGE $stage]")

''')

SPLIT_NODE = Template(r'''    print($progress)
    try:
        if y is not None:
            if isinstance(current_data, pd.DataFrame) and len(current_data) == len(y):
                split_frame = current_data.assign(**{target_column: np.asarray(y)})
            else:
                split_frame = df
            X_train, X_test, y_train, y_test = $func(split_frame, target_column$args)
            current_data = X_train
            split_performed = True
            print(f"    ✓ Split into train ({len(X_train)}) and test ({len(X_test)}) sets")
        else:
            print("    ⚠ No target column, skipping train/test split")
        print("    ✓ Completed")
    except Exception as e:
        print(f"    ⚠ Error in $func: {e}")
        print("    Skipping component...")

''')

TRANSFORM_NODE = Template(r'''    print($progress)
    try:
        result = $func(current_data$args)
        new_data = result[0] if isinstance(result, tuple) else result
        new_test = X_test
        if split_performed and X_test is not None:
            # The test split goes through a separate call, so stateful
            # transforms (scalers, encoders) are refit on X_test here
            result = $func(X_test$args)
            new_test = result[0] if isinstance(result, tuple) else result
$label_sync        current_data = new_data
        if split_performed:
            X_train, X_test = new_data, new_test
        print("    ✓ Completed")
    except Exception as e:
        print(f"    ⚠ Error in $func: {e}")
        print("    Skipping component...")

''')

# Spliced into TRANSFORM_NODE for row-filtering components
LABEL_SYNC = r'''        # Synchronize target variable if rows were removed
        if y is not None and not split_performed:
            if isinstance(new_data, pd.DataFrame) and len(new_data) != len(y):
                synced_y = y.loc[new_data.index]
                y = synced_y
                print(f"    ⚠ Synced target variable: {len(y)} samples remaining")
        if split_performed:
            synced_train, synced_test = y_train, y_test
            if y_train is not None and isinstance(new_data, pd.DataFrame) and len(new_data) != len(y_train):
                synced_train = y_train.loc[new_data.index]
            if y_test is not None and isinstance(new_test, pd.DataFrame) and len(new_test) != len(y_test):
                synced_test = y_test.loc[new_test.index]
            if synced_train is not y_train or synced_test is not y_test:
                y_train, y_test = synced_train, synced_test
                print(f"    ⚠ Synced split labels: {len(y_train)} train / {len(y_test)} test samples remaining")
'''

FIT_NODE = Template(r'''    print($progress)
    if y is not None or y_train is not None:
        try:
            # Prepare data for training
            if split_performed and X_train is not None:
                X_for_training = X_train.values if isinstance(X_train, pd.DataFrame) else X_train
                y_for_training = y_train
                print(f"    ℹ Using training split: {len(X_for_training)} samples")
            else:
                X_for_training = current_data.values if isinstance(current_data, pd.DataFrame) else current_data
                y_for_training = y
                print(f"    ℹ Using all data: {len(X_for_training)} samples")

            # Encode labels if needed
            if hasattr(y_for_training, 'dtype') and not pd.api.types.is_numeric_dtype(y_for_training):
                from sklearn.preprocessing import LabelEncoder
                le = LabelEncoder()
                y_encoded = le.fit_transform(y_for_training)
                print(f"    ✓ Encoded {len(le.classes_)} classes: {list(le.classes_)}")
            else:
                y_encoded = y_for_training.values if hasattr(y_for_training, 'values') else y_for_training

            # Train model
            model = $func(X_for_training, y_encoded$args)
            print("    ✓ Model trained successfully")
        except Exception as e:
            print(f"    ⚠ Training failed: {e}")
            traceback.print_exc()
            model = None
    else:
        print("    ⚠ No target column, skipping training")
        model = None

''')

CROSS_VALIDATION_NODE = Template(r'''    print($progress)
    if model is not None and (y is not None or y_train is not None):
        try:
            # Prepare data for CV
            if split_performed and X_train is not None:
                X_for_cv = X_train.values if isinstance(X_train, pd.DataFrame) else X_train
                y_for_cv = y_train
            else:
                X_for_cv = current_data.values if isinstance(current_data, pd.DataFrame) else current_data
                y_for_cv = y

            # Encode if needed
            if hasattr(y_for_cv, 'dtype') and not pd.api.types.is_numeric_dtype(y_for_cv):
                if le is None:
                    from sklearn.preprocessing import LabelEncoder
                    le = LabelEncoder()
                    y_encoded = le.fit_transform(y_for_cv)
                else:
                    y_encoded = le.transform(y_for_cv)
            else:
                y_encoded = y_for_cv.values if hasattr(y_for_cv, 'values') else y_for_cv

            # Perform cross-validation
            cv_results = $func(model, X_for_cv, y_encoded$args)

            # Print CV results
            if isinstance(cv_results, dict):
                print("\n    Cross-Validation Results:")
                if 'mean_test_score' in cv_results:
                    print(f"      Mean Test Score: {cv_results['mean_test_score']:.4f} (+/- {cv_results.get('std_test_score', 0):.4f})")
                if 'mean_train_score' in cv_results:
                    print(f"      Mean Train Score: {cv_results['mean_train_score']:.4f} (+/- {cv_results.get('std_train_score', 0):.4f})")
                if 'test_scores' in cv_results:
                    print(f"      Individual Fold Scores: {[f'{score:.4f}' for score in cv_results['test_scores']]}")

            print("    ✓ Cross-validation completed")
        except Exception as e:
            print(f"    ⚠ Cross-validation failed: {e}")
            traceback.print_exc()
    else:
        print("    ⚠ No model or target, skipping cross-validation")

''')

EVALUATE_NODE = Template(r'''    print($progress)
    if model is not None and (y is not None or y_train is not None):
        try:
            # Determine which data to use for evaluation
            if split_performed and X_test is not None and y_test is not None:
                X_eval = X_test.values if isinstance(X_test, pd.DataFrame) else X_test
                y_for_eval = y_test
                eval_type = "test"
                print(f"    ℹ Evaluating on test set: {len(X_eval)} samples")
            elif split_performed and X_train is not None:
                X_eval = X_train.values if isinstance(X_train, pd.DataFrame) else X_train
                y_for_eval = y_train
                eval_type = "training"
                print(f"    ⚠ Evaluating on training set: {len(X_eval)} samples")
            else:
                X_eval = current_data.values if isinstance(current_data, pd.DataFrame) else current_data
                y_for_eval = y
                eval_type = "all data"
                print(f"    ⚠ Evaluating on all data: {len(X_eval)} samples")

            # Encode labels if needed
            if hasattr(y_for_eval, 'dtype') and not pd.api.types.is_numeric_dtype(y_for_eval):
                if le is None:
                    from sklearn.preprocessing import LabelEncoder
                    le = LabelEncoder()
                    y_encoded = le.fit_transform(y_for_eval)
                else:
                    y_encoded = le.transform(y_for_eval)
            else:
                y_encoded = y_for_eval.values if hasattr(y_for_eval, 'values') else y_for_eval

            # Make predictions
            y_pred = model.predict(X_eval)

            # Get probabilities if available
            try:
                y_pred_proba = model.predict_proba(X_eval)
            except Exception:
                y_pred_proba = None

            # Calculate metrics
            metrics = $func(y_encoded, y_pred, y_pred_proba$args)

            # Print metrics
            if isinstance(metrics, dict):
                print(f"\n    Metrics ({eval_type} set):")
                for key, value in metrics.items():
                    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
                        print(f"      {key}: {value:.4f}")
                    elif key == 'confusion_matrix':
                        print(f"      {key}:")
                        for row in value:
                            print(f"        {row}")

            print("    ✓ Evaluation completed")
        except Exception as e:
            print(f"    ⚠ Evaluation failed: {e}")
            traceback.print_exc()
    else:
        print("    ⚠ No model or target, skipping evaluation")

''')

FOOTER = Template(r'''    # ============================================================
    # VALIDATION CHECK
    # ============================================================
    if model is not None and not split_performed and not skip_split_warning:
        print("\n⚠ WARNING: Model was trained but no train/test split was performed!")
        print("  Metrics shown are from training data and may be overly optimistic.")
        print("  Consider adding a train/test split component to Stage 1.")

    # ============================================================
    # SAVE OUTPUT
    # ============================================================
    print("\n[SAVING OUTPUT]")

    # Save processed features
    if isinstance(current_data, pd.DataFrame):
        current_data.to_csv(output_file, index=False)
        print(f"✓ Processed features saved to: {output_file}")
    else:
        print("⚠ Could not save output (unsupported data type)")

    # Save test set if available
    if X_test is not None:
        root, extension = os.path.splitext(output_file)
        test_file = f"{root}_test{extension}"
        if isinstance(X_test, pd.DataFrame):
            X_test.to_csv(test_file, index=False)
            print(f"✓ Test features saved to: {test_file}")

    print(f"\n{'=' * 60}")
    print("PIPELINE COMPLETED")
    print(f"{'=' * 60}")

    return {
        'data': current_data,
        'model': model,
        'label_encoder': le,
        'X_train': X_train,
        'X_test': X_test,
        'y_train': y_train,
        'y_test': y_test,
        'split_performed': split_performed
    }

# ============================================================
# MAIN ENTRY POINT
# ============================================================

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Execute ML pipeline')
    parser.add_argument('--data', required=True, help='Input CSV file')
    parser.add_argument('--target', default='target', help='Target column name (default: target)')
    parser.add_argument('--output', default='output.csv', help='Output file (default: output.csv)')
    parser.add_argument('--skip-split-warning', action='store_true', help='Skip train/test split warning')

    args = parser.parse_args()

    try:
        result = execute_pipeline(args.data, args.target, args.output, args.skip_split_warning)
        print("\n✓ Pipeline executed successfully!")

        if result['model'] is not None:
            print("✓ Model trained and ready to use")

        if result['split_performed']:
            print("✓ Train/test split performed")
            if result['X_test'] is not None:
                print(f"  - Training samples: {len(result['X_train'])}")
                print(f"  - Test samples: {len(result['X_test'])}")

    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found - {e}")
        print(f"Make sure the file '{args.data}' exists")
        sys.exit($exit_file_not_found)
    except KeyError as e:
        print(f"\n❌ Error: Column not found - {e}")
        print(f"Make sure the target column '{args.target}' exists in your CSV")
        sys.exit($exit_missing_column)
    except Exception as e:
        print(f"\n❌ Error: {e}")
        traceback.print_exc()
        sys.exit($exit_generic_failure)
''')
