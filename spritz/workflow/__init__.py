"""Pipeline stages run with timing and a results summary.
"""
from spritz.workflow.base import SpritzFlow, WorkflowResult, WorkflowType, read_summary
