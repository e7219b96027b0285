"""
Question Paper Generation
questify/generation/

1. Prompt Builder     — GenerateRequest → single natural-language prompt
2. GPT Client         — OpenAI-compatible chat call constrained to JSON output
3. Service            — fence stripping, JSON parse, schema validation, invariants
4. Exporters          — deterministic plain text and reportlab PDF
"""
