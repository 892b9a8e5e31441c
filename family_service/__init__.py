"""
Family Service - Succession Computation Engine
Kenyan Law of Succession Act (Cap. 160) distribution, dependency and guardianship rules
"""

__version__ = "0.1.0"
