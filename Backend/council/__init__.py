# council/__init__.py
"""
LLM Council - Ideation -> Execution -> Judgment pipeline orchestrator.
"""
