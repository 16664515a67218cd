"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. This is where the REST datastore,
the LLM API, and other external integrations live.
"""
