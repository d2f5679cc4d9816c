"""Relation lookup against a remote SPARQL endpoint (e.g. DBpedia)"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from SPARQLWrapper import JSON, SPARQLWrapper

from ..config import Config
from ..core.base_relation_lookup import BaseRelationLookup

logger = logging.getLogger(__name__)

_NEIGHBOR_QUERY = """
SELECT ?s ?p ?o WHERE {{
  {{ <{uri}> ?p ?o . BIND(<{uri}> AS ?s) }}
  UNION
  {{ ?s ?p <{uri}> . BIND(<{uri}> AS ?o) }}
  FILTER(isIRI(?s) && isIRI(?o))
}} LIMIT {limit}
"""


class SparqlRelationLookup(BaseRelationLookup):
    """
    One-hop lookup issuing a SPARQL SELECT per entity

    Relations are recognized by namespace: a local name starting with a
    lower-case letter under one of the relation prefixes
    (dbo:birthPlace is a relation, dbo:Person is a class).
    """

    _UA = "ngram-qa/0.1 (SPARQL relation lookup)"

    def __init__(
        self,
        endpoint: str = Config.SPARQL_ENDPOINT,
        timeout: int = Config.SPARQL_TIMEOUT_SECONDS,
        limit: int = Config.SPARQL_RESULT_LIMIT,
        relation_prefixes: Iterable[str] = Config.RELATION_PREFIXES,
        sparql: Optional[SPARQLWrapper] = None
    ):
        """
        Initialize SPARQL lookup

        Args:
            endpoint: SPARQL endpoint URL
            timeout: Request timeout in seconds
            limit: Maximum triples per entity
            relation_prefixes: Namespaces whose members are relations
            sparql: Preconfigured SPARQLWrapper (created for endpoint if not given)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.limit = limit
        self.relation_prefixes = tuple(relation_prefixes)

        self._sparql = sparql or SPARQLWrapper(endpoint)
        self._sparql.setReturnFormat(JSON)
        self._sparql.setTimeout(timeout)
        self._sparql.addCustomHttpHeader("User-Agent", self._UA)
        # setQuery/queryAndConvert share wrapper state between threads
        self._lock = threading.Lock()

    def _q(self, query: str) -> List[Dict[str, Any]]:
        with self._lock:
            self._sparql.setQuery(query)
            return self._sparql.queryAndConvert()["results"]["bindings"]

    def neighbors(self, entity: str) -> Set[Tuple[str, str]]:
        """
        Raises:
            SPARQLWrapper or urllib errors on transport and endpoint failures
        """
        uri = entity.strip('<>')
        if not uri.startswith(("http://", "https://")) or any(c in uri for c in '<>" {}'):
            logger.debug("Not a resource IRI, skipping: %s", entity)
            return set()

        found = set()
        for row in self._q(_NEIGHBOR_QUERY.format(uri=uri, limit=self.limit)):
            s, p, o = (row[k]['value'] for k in ('s', 'p', 'o'))
            neighbor = o if s == uri else s
            if neighbor != uri:
                found.add((p, neighbor))
        return found

    def is_relation(self, identifier: str) -> bool:
        for prefix in self.relation_prefixes:
            if identifier.startswith(prefix):
                local_name = identifier[len(prefix):]
                return bool(local_name) and local_name[0].islower()
        return False

    def __repr__(self):
        return f"SparqlRelationLookup(endpoint='{self.endpoint}', limit={self.limit})"
