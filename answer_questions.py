#!/usr/bin/env python3
"""
Answer keyword questions with n-gram linking + candidate graph expansion

- Entity linking: longest-match-first n-grams against a surface-form dictionary
- Dictionary: exact (hashmap) or approximate (fuzzy index)
- Knowledge base: pickled NetworkX graph or a SPARQL endpoint
- Answer: best-explained node of the expanded candidate graph
"""

import argparse
from datetime import datetime

from dotenv import load_dotenv

from ngram_qa.answer_selector import AnswerSelector
from ngram_qa.config import Config
from ngram_qa.dictionaries import BACKENDS, TsvImportSource, create_dictionary
from ngram_qa.knowledge_base import GraphRelationLookup, SparqlRelationLookup
from ngram_qa.utils.evaluator import Evaluator
from ngram_qa.utils.loader import load_graph, load_qa_dataset
from ngram_qa.utils.logging_utils import setup_logging


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description='Answer keyword questions over a knowledge base',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Answer a single question
  python answer_questions.py --question "birthplace bill gates wife"

  # Evaluate on a dataset with the fuzzy dictionary, 100 questions
  python answer_questions.py --dataset data/qa_test.txt --dictionary fuzzy --limit 100

  # Use DBpedia instead of the local graph
  python answer_questions.py --question "birthplace barack obama wife" --sparql
        """
    )
    parser.add_argument('--question', type=str, help='Single question to answer')
    parser.add_argument('--dataset', type=str, default=None,
                        help='QA dataset (question[TAB]answer1|answer2)')
    parser.add_argument('--limit', type=int, default=None,
                        help='Maximum questions from the dataset (default: all)')
    parser.add_argument('--dictionary', choices=BACKENDS, default=Config.DICTIONARY_BACKEND,
                        help=f'Dictionary backend (default: {Config.DICTIONARY_BACKEND})')
    parser.add_argument('--surface-forms', default=Config.SURFACE_FORMS_PATH,
                        help='Surface form TSV file')
    parser.add_argument('--index', default=Config.INDEX_PATH,
                        help='Fuzzy index location')
    parser.add_argument('--graph', default=Config.GRAPH_PATH,
                        help='Pickled knowledge graph')
    parser.add_argument('--sparql', action='store_true',
                        help=f'Use the SPARQL endpoint {Config.SPARQL_ENDPOINT} instead of --graph')
    parser.add_argument('--max-depth', type=int, default=Config.MAX_EXPANSION_DEPTH)
    parser.add_argument('--max-nodes', type=int, default=Config.MAX_GRAPH_NODES)
    parser.add_argument('--workers', type=int, default=Config.MAX_WORKERS,
                        help='Threads for dictionary and relation lookups')
    parser.add_argument('--log-level', default=Config.LOG_LEVEL)

    args = parser.parse_args()
    if not args.question and not args.dataset:
        parser.error('one of --question or --dataset is required')

    setup_logging(args.log_level)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    print("\n" + "=" * 80)
    print(" N-GRAM QA: Dictionary Linking + Candidate Graph Expansion")
    print("=" * 80)
    print(f"  Dictionary: {args.dictionary}")
    print(f"  Knowledge base: {'SPARQL ' + Config.SPARQL_ENDPOINT if args.sparql else args.graph}")
    print(f"  Bounds: depth {args.max_depth}, {args.max_nodes} nodes")
    print("=" * 80 + "\n")

    # =========================================================================
    # Load Resources
    # =========================================================================
    print("[1/3] Loading resources...")
    print("-" * 80)

    with create_dictionary(
        args.dictionary,
        source=TsvImportSource(args.surface_forms),
        index_path=args.index
    ) as dictionary:
        print(f"  Dictionary entries: {len(dictionary):,}")

        if args.sparql:
            relation_lookup = SparqlRelationLookup()
        else:
            relation_lookup = GraphRelationLookup(load_graph(args.graph))
        print(f"  {relation_lookup}")

        selector = AnswerSelector(
            dictionary,
            relation_lookup,
            max_depth=args.max_depth,
            max_nodes=args.max_nodes,
            max_workers=args.workers
        )

        # =====================================================================
        # Answer
        # =====================================================================
        if args.question:
            print(f"\n[2/3] Answering: {args.question}")
            print("-" * 80)
            graph = selector.get_graph_for(args.question)
            answers = selector.select(graph) if args.question.split() else None
            print(f"  Graph: {len(graph)} nodes, {len(graph.get_edges())} edges "
                  f"({graph.stats.rounds} rounds, connected={graph.stats.connected})")
            if answers is None:
                print("  No answer (empty question)")
            elif not answers:
                print("  No answer found")
            for answer in sorted(answers or ()):
                print(f"  -> {answer} (explanation {graph.get_node(answer).explanation})")

        if args.dataset:
            print(f"\n[2/3] Evaluating on {args.dataset}...")
            print("-" * 80)
            questions = load_qa_dataset(args.dataset, limit=args.limit)

            variant_name = f"{args.dictionary}_depth{args.max_depth}"
            limit_str = f"_limit{args.limit}" if args.limit else "_full"
            output_path = f"{Config.RESULTS_DIR}/{variant_name}{limit_str}_{timestamp}.json"

            evaluator = Evaluator(selector, variant_name, incremental_save_path=output_path)
            evaluation = evaluator.evaluate(questions, verbose=True)
            evaluator.save_results(evaluation, output_path)

    print("\n[3/3] Done")


if __name__ == "__main__":
    main()
