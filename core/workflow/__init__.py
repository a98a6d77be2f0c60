"""Workflow execution and script export."""
