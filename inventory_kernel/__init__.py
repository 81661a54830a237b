"""
Inventory Kernel - calculation core for the inventory management system.

Pure, deterministic inventory arithmetic with:
- Decimal-only monetary math with explicit cent rounding
- Tagged "days of cover" values instead of floating-point infinity
- Typed boundary parsing for rows delivered by the data store
- Structured JSON logging
"""

__version__ = "0.1.0"
