"""
Configuration settings for NullFake.

Centralized configuration for the review scoring pipeline.
Every value can be overridden through the environment.
"""

import os

# Provider selection ("openai" or "gemini")
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")

# OpenAI-compatible chat completion API
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
USER_AGENT = "ReviewAnalyzer/1.0"

# Gemini
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

# Sampling (deterministic)
LLM_TEMPERATURE = 0.0
LLM_TOP_P = 0.1

# Single-batch requests
BATCH_TIMEOUT_SECONDS = int(os.getenv("OPENAI_TIMEOUT", "120"))
BATCH_CONNECT_TIMEOUT_SECONDS = 30
BATCH_MAX_ATTEMPTS = int(os.getenv("OPENAI_MAX_ATTEMPTS", "2"))
BATCH_RETRY_BACKOFF_SECONDS = float(os.getenv("OPENAI_RETRY_BACKOFF", "1.0"))

# Chunked requests
CHUNK_SIZE = int(os.getenv("OPENAI_CHUNK_SIZE", "25"))
PARALLEL_THRESHOLD = int(os.getenv("OPENAI_PARALLEL_THRESHOLD", "50"))
CHUNK_TIMEOUT_SECONDS = 60
CHUNK_CONNECT_TIMEOUT_SECONDS = 20
DISPATCH_MODE = os.getenv("OPENAI_DISPATCH_MODE", "parallel")  # "parallel" or "sequential"
CHUNK_DELAY_SECONDS = float(os.getenv("OPENAI_CHUNK_DELAY", "0.2"))  # sequential mode only

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "nullfake.log"
