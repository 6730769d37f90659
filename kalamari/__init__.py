"""Static security analysis for web pages: CSP, SRI, DOM clobbering, DOM sinks and XSS payloads."""

__version__ = "0.0.2"
__all__ = ["clobbering", "csp", "payloads", "sinks", "sri", "stored", "triggers"]