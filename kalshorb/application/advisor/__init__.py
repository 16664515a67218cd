"""
Advisor bounded context: application layer.

Use cases that orchestrate chat and quick-action requests
over the domain services and ports.
"""
