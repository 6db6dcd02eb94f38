"""auth/ -- Credential hashing, token issuance and the sign-up/sign-in flow.

Layer rule: auth/ imports only stdlib + third-party libraries, plus core/
for settings in TokenIssuer.from_settings(). It does NOT import from api/.
api/ imports from auth/, not the other way around.
"""
