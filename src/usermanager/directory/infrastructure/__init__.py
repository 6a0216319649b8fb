"""Infrastructure layer for the directory bounded context.

Contains the LDAP connection adapter, the entity mapping layer and the
permission-scoped repositories built on them.
"""
