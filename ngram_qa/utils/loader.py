"""Utilities for loading the knowledge graph and QA datasets"""

import logging
import pickle
from pathlib import Path
from typing import Iterator, List, Tuple, Union

import networkx as nx

from ..core.question import Question

logger = logging.getLogger(__name__)


def iter_kb_triples(kb_path: Union[str, Path]) -> Iterator[Tuple[str, str, str]]:
    """
    Read (subject, relation, object) triples from a text file

    One triple per line, fields separated by '|' or by tabs:
        http://dbpedia.org/resource/Bill_Gates|http://dbpedia.org/ontology/spouse|http://dbpedia.org/resource/Melinda_Gates
    Lines that do not have exactly three fields are skipped with a warning.
    """
    with open(kb_path, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            parts = line.split('\t') if '\t' in line else line.split('|')
            parts = [part.strip() for part in parts]
            if len(parts) != 3 or not all(parts):
                logger.warning("Skipping malformed triple on line %d: %r", line_number, line[:80])
                continue

            yield parts[0], parts[1], parts[2]


def load_kb_triples(kb_path: Union[str, Path]) -> nx.MultiDiGraph:
    """
    Load knowledge-base triples into a NetworkX MultiDiGraph

    Args:
        kb_path: Path to the triples file

    Returns:
        Graph with one edge per triple, relation stored in the 'relation' attribute
    """
    logger.info("Loading knowledge base from %s", kb_path)
    graph = nx.MultiDiGraph()
    for s, r, o in iter_kb_triples(kb_path):
        graph.add_edge(s, o, relation=r)

    logger.info("Graph loaded: %d nodes, %d edges", graph.number_of_nodes(), graph.number_of_edges())
    return graph


def load_graph(graph_path: Union[str, Path]) -> nx.MultiDiGraph:
    """
    Load NetworkX graph from pickle file

    Args:
        graph_path: Path to graph.pkl

    Returns:
        NetworkX graph
    """
    logger.info("Loading graph from %s", graph_path)
    with open(graph_path, 'rb') as f:
        graph = pickle.load(f)

    logger.info("Graph loaded: %d nodes, %d edges", graph.number_of_nodes(), graph.number_of_edges())
    return graph


def save_graph(graph: nx.MultiDiGraph, output_path: Union[str, Path]) -> int:
    """
    Save graph to pickle file

    Returns:
        Size of the written file in bytes
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'wb') as f:
        pickle.dump(graph, f)
    return output_path.stat().st_size


def load_qa_dataset(dataset_path: Union[str, Path], limit: int = None) -> List[Question]:
    """
    Load QA dataset from file

    Args:
        dataset_path: Path to a question[TAB]answer1|answer2 file
        limit: Maximum number of questions to load (None = all)

    Returns:
        List of Question objects
    """
    logger.info("Loading questions from %s", dataset_path)

    questions = []
    with open(dataset_path, 'r', encoding='utf-8') as f:
        for i, line in enumerate(f):
            if limit and len(questions) >= limit:
                break

            line = line.strip()
            if not line:
                continue

            try:
                questions.append(Question.from_line(line, question_id=i))
            except ValueError as e:
                logger.warning("Failed to parse line %d: %s", i, e)
                continue

    logger.info("Loaded %d questions", len(questions))
    return questions
