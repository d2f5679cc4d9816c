"""
Export the candidate graph of a question to GEXF format for Gephi visualization

Node attributes: explanation, coverage (question word positions), is_relation, derived.
Edge attribute: relation.
"""
import argparse
from pathlib import Path

import networkx as nx
from dotenv import load_dotenv

from ngram_qa.answer_selector import AnswerSelector
from ngram_qa.config import Config
from ngram_qa.dictionaries import BACKENDS, TsvImportSource, create_dictionary
from ngram_qa.knowledge_base import GraphRelationLookup
from ngram_qa.utils.loader import load_graph
from ngram_qa.utils.logging_utils import setup_logging


def main():
    load_dotenv()
    setup_logging()

    parser = argparse.ArgumentParser(description='Export a question\'s candidate graph to GEXF')
    parser.add_argument('question', help='Question, e.g. "birthplace bill gates wife"')
    parser.add_argument('--output', default='results/candidate_graph.gexf')
    parser.add_argument('--dictionary', choices=BACKENDS, default=Config.DICTIONARY_BACKEND)
    parser.add_argument('--surface-forms', default=Config.SURFACE_FORMS_PATH)
    parser.add_argument('--index', default=Config.INDEX_PATH)
    parser.add_argument('--graph', default=Config.GRAPH_PATH)
    args = parser.parse_args()

    with create_dictionary(args.dictionary, TsvImportSource(args.surface_forms), args.index) as dictionary:
        selector = AnswerSelector(dictionary, GraphRelationLookup(load_graph(args.graph)))
        candidate_graph = selector.get_graph_for(args.question)
        answers = selector.select(candidate_graph)

    G = candidate_graph.to_networkx()
    for node in G.nodes:
        G.nodes[node]['answer'] = node in answers

    print(f"Candidate graph: {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")
    print(f"Answers: {', '.join(sorted(answers)) or '-'}")

    Path(args.output).parent.mkdir(parents=True, exist_ok=True)
    print(f"\nExporting to {args.output}...")
    nx.write_gexf(G, args.output)

    print(f"\n✓ Export complete!")
    print(f"\nTo use in Gephi:")
    print(f"  1. Open Gephi")
    print(f"  2. File → Open → Select '{args.output}'")
    print(f"  3. Size nodes by 'explanation' and color by 'answer'")


if __name__ == '__main__':
    main()
