"""
InvestWise - Source Package

A console assistant for tracking a personal investment portfolio,
working out zakat on it, and keeping a (simulated) bank link.

DESIGN PRINCIPLES:
1. Prices are fixed and every asset kind has exactly one
2. Fail early, fail visibly
3. Every mutation is written through to disk
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "InvestWise Team"
