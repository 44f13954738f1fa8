"""
Portfolio Admin Modules
=======================

Flask blueprint modules: the admin shell, one management view per
content collection, and the public read API.
"""

__all__ = ['dashboard', 'projects', 'experience', 'about', 'contacts', 'portfolio_public']
