"""Terminal and HTTP chat front-end for the Gemini generateContent API."""

__version__ = "0.1.0"
