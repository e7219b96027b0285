"""
Client-side workflow.

  catalog.py     — domains, sub-domains, subjects, question types
  api_client.py  — async HTTP client for the Questify API
  session.py     — process-wide auth session with lifecycle events
  controller.py  — DomainSelect → Configure → Preview / History state machine
"""
