"""Service layer: component store, workflow execution and export."""
