"""
Replate - campus surplus food claiming service.
"""
