"""
Data structures of the observed and addressed resources.

All the functions here are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
