"""
Credential check, login and token-protected user lookup.
"""
