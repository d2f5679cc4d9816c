"""Evaluation utilities"""

import json
import statistics
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List

from ..answer_selector import AnswerSelector
from ..core.answer_result import AnswerResult
from ..core.question import Question


class Evaluator:
    """Evaluate an answer selector on a QA dataset"""

    def __init__(
        self,
        selector: AnswerSelector,
        variant_name: str,
        max_workers: int = 1,
        incremental_save_path: str = None
    ):
        """
        Initialize evaluator

        Args:
            selector: Answer selector under evaluation
            variant_name: Name of this run (e.g., "hashmap_depth4")
            max_workers: Questions answered in parallel
            incremental_save_path: If provided, save results after each question
        """
        self.selector = selector
        self.variant_name = variant_name
        self.max_workers = max_workers
        self.incremental_save_path = incremental_save_path

    def evaluate(self, questions: List[Question], verbose: bool = True) -> Dict:
        """
        Evaluate on a list of questions

        Args:
            questions: List of Question objects
            verbose: Print progress

        Returns:
            Dictionary with variant name, aggregate metrics and per-question results
        """
        eval_start_time = time.time()
        results: List[AnswerResult] = []

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(self.selector.run, q): q for q in questions}
                for future in as_completed(futures):
                    results.append(future.result())
                    self._progress(len(results), len(questions), verbose)
                    self._save_incremental(results, eval_start_time)
            results.sort(key=lambda r: (r.question_id is None, r.question_id))
        else:
            for question in questions:
                results.append(self.selector.run(question))
                self._progress(len(results), len(questions), verbose)
                self._save_incremental(results, eval_start_time)

        metrics = self._compute_metrics(results, time.time() - eval_start_time)

        if verbose:
            self._print_metrics(metrics)

        return {
            'variant_name': self.variant_name,
            'metrics': metrics,
            'results': results
        }

    @staticmethod
    def _progress(done: int, total: int, verbose: bool):
        if verbose and done % 100 == 0:
            print(f"  Progress: {done}/{total} questions")

    def _compute_metrics(self, results: List[AnswerResult], total_eval_time: float) -> Dict:
        """Compute aggregate metrics"""
        total = len(results)
        if total == 0:
            return {}

        correct = sum(1 for r in results if r.is_correct)
        successful = sum(1 for r in results if r.success)
        connected = sum(1 for r in results if r.connected)
        bound_hits = sum(1 for r in results if r.bound_hit)

        nodes_expanded = [r.nodes_expanded for r in results]
        graph_sizes = [r.graph_size for r in results]
        search_times = [r.search_time_ms for r in results]

        total_tp = sum(r.num_correct for r in results)
        total_fp = sum(r.num_incorrect for r in results)
        total_fn = sum(r.num_missed for r in results)

        micro_precision = total_tp / (total_tp + total_fp) if (total_tp + total_fp) > 0 else 0.0
        micro_recall = total_tp / (total_tp + total_fn) if (total_tp + total_fn) > 0 else 0.0
        micro_f1 = (2 * micro_precision * micro_recall / (micro_precision + micro_recall)
                    if (micro_precision + micro_recall) > 0 else 0.0)

        return {
            'total_questions': total,
            'correct_answers': correct,
            'accuracy': correct / total,
            'successful_answers': successful,
            'success_rate': successful / total,
            'connected_rate': connected / total,
            'bound_hit_rate': bound_hits / total,

            # Macro-averaging: every question counts equally
            'macro_avg_precision': sum(r.precision for r in results) / total,
            'macro_avg_recall': sum(r.recall for r in results) / total,
            'macro_avg_f1_score': sum(r.f1_score for r in results) / total,

            # Micro-averaging: every answer counts equally
            'micro_precision': micro_precision,
            'micro_recall': micro_recall,
            'micro_f1_score': micro_f1,

            'avg_nodes_expanded': sum(nodes_expanded) / total,
            'max_nodes_expanded': max(nodes_expanded),
            'avg_graph_size': sum(graph_sizes) / total,
            'max_graph_size': max(graph_sizes),

            'avg_search_time_ms': sum(search_times) / total,
            'median_search_time_ms': statistics.median(search_times),
            'total_eval_time_sec': total_eval_time,
            'queries_per_second': total / total_eval_time if total_eval_time > 0 else 0,
        }

    def _print_metrics(self, metrics: Dict):
        """Print metrics in a nice format"""
        if not metrics:
            print("  No questions evaluated.")
            return

        print("\n" + "=" * 80)
        print(f"  EVALUATION RESULTS: {self.variant_name}")
        print("=" * 80)

        print("\n  ACCURACY METRICS:")
        print(f"    Total questions:     {metrics['total_questions']}")
        print(f"    Correct answers:     {metrics['correct_answers']}")
        print(f"    Accuracy:            {metrics['accuracy']:.2%}")
        print(f"    Success rate:        {metrics['success_rate']:.2%}")

        print("\n  ANSWER QUALITY METRICS:")
        print(f"    Precision (macro):   {metrics['macro_avg_precision']:.2%}   (micro: {metrics['micro_precision']:.2%})")
        print(f"    Recall (macro):      {metrics['macro_avg_recall']:.2%}   (micro: {metrics['micro_recall']:.2%})")
        print(f"    F1 Score (macro):    {metrics['macro_avg_f1_score']:.2%}   (micro: {metrics['micro_f1_score']:.2%})")

        print("\n  GRAPH METRICS:")
        print(f"    Connected graphs:    {metrics['connected_rate']:.2%}")
        print(f"    Bound reached:       {metrics['bound_hit_rate']:.2%}")
        print(f"    Avg graph size:      {metrics['avg_graph_size']:.1f}  (max: {metrics['max_graph_size']})")
        print(f"    Avg nodes expanded:  {metrics['avg_nodes_expanded']:.1f}  (max: {metrics['max_nodes_expanded']})")

        print("\n  TIMING METRICS:")
        print(f"    Total eval time:     {metrics['total_eval_time_sec']:.1f} sec")
        print(f"    Avg search time:     {metrics['avg_search_time_ms']:.2f} ms")
        print(f"    Median search time:  {metrics['median_search_time_ms']:.2f} ms")
        print("=" * 80 + "\n")

    def _save_incremental(self, results: List[AnswerResult], eval_start_time: float):
        """Overwrite the incremental save file with the results so far"""
        if not self.incremental_save_path:
            return

        output = {
            'variant_name': self.variant_name,
            'metrics': self._compute_metrics(results, time.time() - eval_start_time),
            'results': [r.to_dict() for r in results],
            'status': 'in_progress',
            'last_updated': time.time()
        }

        Path(self.incremental_save_path).parent.mkdir(parents=True, exist_ok=True)
        with open(self.incremental_save_path, 'w') as f:
            json.dump(output, f, indent=2)

    def save_results(self, evaluation: Dict, output_path: str):
        """
        Save evaluation results to JSON

        Args:
            evaluation: Output from evaluate()
            output_path: Path to save JSON file
        """
        output = {
            'variant_name': evaluation['variant_name'],
            'metrics': evaluation['metrics'],
            'results': [r.to_dict() for r in evaluation['results']],
            'status': 'completed'
        }

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(output, f, indent=2)

        print(f"  Results saved to: {output_path}")
