"""
AI Relay package.

Provides:
- Prompt templates for translation, summarization, image description and resume helpers
- A provider-agnostic generation client (Gemini via google-genai; OpenAI-compatible via httpx)
- FastAPI relay that keeps the provider credential server-side
"""

__version__ = "0.1.0"
