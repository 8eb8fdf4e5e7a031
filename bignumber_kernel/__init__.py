"""
BigNumber Kernel

Exact decimal values for SQLAlchemy models:
- BigNumber value type with fixed-scale rendering and exact comparison
- Field adapter: cast, required/min/max validators, query translation
- String-backed column type, assignment casting and flush-time validation
- Consistent rendering to storage, plain objects and JSON
"""

__version__ = "0.1.0"
