"""
Advisor bounded context: domain layer.

This module contains all domain logic for the advisor context:
- Intent classification of user messages
- Templated fallback replies
- System prompt construction for the LLM
- Confidence scoring and suggested follow-up actions
"""
