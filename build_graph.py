"""
Build the NetworkX knowledge graph used for relation lookup.

Reads subject|relation|object triples and pickles a MultiDiGraph.
"""
import argparse

from dotenv import load_dotenv

from ngram_qa.config import Config
from ngram_qa.utils.loader import load_kb_triples, save_graph
from ngram_qa.utils.logging_utils import setup_logging


def main():
    load_dotenv()
    setup_logging()

    parser = argparse.ArgumentParser(description='Build knowledge graph pickle from triples')
    parser.add_argument('--triples', default=Config.KB_TRIPLES_PATH,
                        help=f'Triples file (default: {Config.KB_TRIPLES_PATH})')
    parser.add_argument('--output', default=Config.GRAPH_PATH,
                        help=f'Output pickle (default: {Config.GRAPH_PATH})')
    args = parser.parse_args()

    print(f"Loading knowledge base from {args.triples}...")
    G = load_kb_triples(args.triples)

    relations = {data['relation'] for _, _, data in G.edges(data=True)}
    print(f"\nGraph Statistics:")
    print(f"  Nodes:     {G.number_of_nodes():,}")
    print(f"  Edges:     {G.number_of_edges():,}")
    print(f"  Relations: {len(relations):,}")

    print(f"\nSaving graph to {args.output}...")
    size_mb = save_graph(G, args.output) / (1024 * 1024)
    print(f"Saved graph ({size_mb:.1f} MB)")


if __name__ == '__main__':
    main()
