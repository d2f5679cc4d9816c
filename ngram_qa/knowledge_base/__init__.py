"""Knowledge-base relation lookup components"""

from .graph_lookup import GraphRelationLookup
from .sparql_lookup import SparqlRelationLookup

__all__ = ['GraphRelationLookup', 'SparqlRelationLookup']
