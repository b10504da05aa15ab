"""catalog/ -- Book inventory: domain dataclass, field rules, and store.

Layer rule: catalog/ imports only core/ + third-party libraries.
"""
