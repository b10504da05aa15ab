"""auth/ -- Credential storage, token issuance, and the bearer-token gate.

Layer rule: auth/ imports only core/ + third-party libraries.
It does NOT import from api/ or catalog/.
api/ imports from auth/, not the other way around.
"""
