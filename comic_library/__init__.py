"""
Comic book library persistence.

Models, repository and database plumbing for a library of comic books,
their series, and the artists credited on them.
"""
