"""Resource modules of the Keycloak admin API.

Every operation is a coroutine function taking the client handle first; the
handle binds them into namespaces (see ``keycloakadmin.binding``).
"""
