"""
Infrastructure adapters for the advisor bounded context.

Each adapter implements a domain port (ABC) and connects
to external systems: the hosted REST datastore and the
OpenRouter chat-completion API.
"""
