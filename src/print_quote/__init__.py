"""
Print Quote Package

Instant pricing for the 3D-printing service.
Resolves part dimensions, material, infill, layer height and quantity
into a cost breakdown using an editable pricing table.
"""

__version__ = "1.0.0"
