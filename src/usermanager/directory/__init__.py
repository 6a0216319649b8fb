"""Directory bounded context.

Manages users and roles stored in an LDAP directory behind
permission-scoped repositories.
"""
