"""Infrastructure layer for vetrecords.

Configuration, logging and domain-event publishing. Nothing in the domain
layer imports from here.
"""
