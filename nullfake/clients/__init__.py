"""
API clients for NullFake.

Each client implements nullfake.clients.base.ApiClient:
- OpenAIChatClient: OpenAI-compatible /chat/completions over HTTP
- GeminiChatClient: Google Gemini via google-generativeai
"""
