"""
Boundary layer for external search backends.

Provides the Store Contract, its dense-vector and lexical drivers, and the
factory that resolves a namespace's configuration into a live driver.
"""
