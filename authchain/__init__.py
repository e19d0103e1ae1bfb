"""
Authchain - Pluggable Request Authentication for ASGI Applications

Intercepts incoming requests, asks a configured strategy whether the request
carries valid credentials, and routes it to the protected application or to
a failure handler.

Architecture:
- Each module is self-contained with clear interfaces
- Strategies are completely replaceable and composable
- Integrators supply the verify functions; no account logic lives here

Modules:
- strategy: Strategy protocol, JWT and form-credential strategies, composition
- middleware: ASGI adapter routing to protected or failure handlers
"""

__version__ = "1.0.0"
