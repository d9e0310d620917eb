"""Server-rendered key/value pages.

Intentionally lightweight:
- served by the same FastAPI process
- one store client per request, closed before the response is sent
- simple HTML forms + redirects, no error feedback on failed writes
"""
