"""Routing — method plus ``:param`` path templates, first match wins.

Routes are registered with the transport as predicates in declaration
order; the transport picks the first one that matches.
"""
