# ABOUTME: Stratus weather assistant package.
# ABOUTME: Location extraction, provider normalization, and LLM chat orchestration for weather questions.
