"""
Pipeline stages for NullFake.

Contains the modules a batch of reviews passes through:
- Prompt Builder
- Chunk Dispatcher
- Response Parser
- Aggregation
"""
