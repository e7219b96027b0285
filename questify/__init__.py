"""
Questify — AI practice question paper generator.

Packages:
  generation/  — prompt contract, LLM client, schemas, exporters
  database/    — SQLAlchemy session + question_papers / users tables
  routers/     — FastAPI endpoints (/api/generate, /api/papers, /api/auth)
  auth/        — password + token helpers
  workflow/    — client-side state machine driving the user journey
"""

__version__ = "0.1.0"
