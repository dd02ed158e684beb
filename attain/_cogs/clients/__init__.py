"""
A thin client for the Kubernetes API, as needed by the engines and no more.

It is a reference implementation of the resource-accessing collaborators:
the engines themselves depend only on the protocols (see `accessors`).
"""
