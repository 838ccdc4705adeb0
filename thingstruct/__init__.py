"""
ThingStruct - daily states, templates and the rolling routine stream
"""
__version__ = "1.0.0"
