"""
Utility modules for NullFake.

Cross-cutting concerns:
- Text: sanitization of user-submitted review text
- Tokens: max_tokens budget per batch
- Events: observability sink
"""
