import json

import pytest

from ngram_qa.core.errors import ImportSourceError
from ngram_qa.core.question import Question
from ngram_qa.dictionaries import DictionaryBuilder, HashMapDictionary, TsvImportSource, parse_tsv_lines
from ngram_qa.utils.evaluator import Evaluator
from ngram_qa.utils.loader import iter_kb_triples, load_graph, load_kb_triples, load_qa_dataset, save_graph

from .conftest import DBR, KB_FILE, QA_FILE, TSV_FILE


# ---------------------------------------------------------------------------
# Surface form import
# ---------------------------------------------------------------------------

def test_parse_tsv_lines_expands_aliases(caplog):
    lines = [
        "E1\tBill Gates\tWilliam Henry Gates\n",
        "\n",
        "E2\n",
        "\tno entity\n",
        "E3\t  \tThird\r\n",
    ]
    assert list(parse_tsv_lines(lines)) == [
        ("E1", "Bill Gates"),
        ("E1", "William Henry Gates"),
        ("E3", "Third"),
    ]
    assert caplog.text.count("Skipping malformed line") == 2


def test_tsv_source_records_skipped_lines(tmp_path):
    path = tmp_path / "forms.tsv"
    path.write_text("E1\tfirst\nbroken\n\nE2\tsecond\n", encoding="utf-8")
    source = TsvImportSource(path)

    assert list(source) == [("E1", "first"), ("E2", "second")]
    assert source.skipped_lines == [2]


def test_tsv_source_missing_file_raises(tmp_path):
    with pytest.raises(ImportSourceError):
        list(TsvImportSource(tmp_path / "missing.tsv"))


def test_build_from_tsv_file():
    dictionary = DictionaryBuilder.build(TsvImportSource(TSV_FILE))
    assert dictionary.get("william henry gates") == {DBR + "Bill_Gates"}
    assert dictionary.get("obama") == {DBR + "Barack_Obama"}


def test_import_twice_is_idempotent():
    dictionary = DictionaryBuilder.build(TsvImportSource(TSV_FILE))
    entries = {key: set(ids) for key, ids in dictionary.entries()}

    count = DictionaryBuilder.add_all(dictionary, TsvImportSource(TSV_FILE))

    assert count > 0
    assert {key: set(ids) for key, ids in dictionary.entries()} == entries


def test_unreadable_source_keeps_partial_dictionary(tmp_path, caplog):
    dictionary = HashMapDictionary([("E1", "first")])
    count = DictionaryBuilder.add_all(dictionary, TsvImportSource(tmp_path / "missing.tsv"))

    assert count == 0
    assert dictionary.get("first") == {"E1"}
    assert "Import from" in caplog.text


def test_bad_encoding_stops_import(tmp_path, caplog):
    path = tmp_path / "forms.tsv"
    path.write_bytes(b"E1\tfirst\nE2\t\xff\xfe broken\n")
    dictionary = DictionaryBuilder.build(TsvImportSource(path))
    assert dictionary.get("broken") is None
    assert "Import from" in caplog.text


def test_malformed_pair_stops_import(caplog):
    source = [("E1", "first"), ("E2",), ("E3", "third")]
    dictionary = HashMapDictionary()
    count = DictionaryBuilder.add_all(dictionary, source)

    assert count == 1
    assert dictionary.get("first") == {"E1"}
    assert dictionary.get("third") is None
    assert "Import from" in caplog.text


# ---------------------------------------------------------------------------
# Knowledge base and datasets
# ---------------------------------------------------------------------------

def test_iter_kb_triples_skips_comments_and_malformed(tmp_path, caplog):
    path = tmp_path / "kb.txt"
    path.write_text("# header\nA|r|B\nC\ts\tD\nbroken|line\n\n")
    assert list(iter_kb_triples(path)) == [("A", "r", "B"), ("C", "s", "D")]
    assert "Skipping malformed triple" in caplog.text


def test_load_and_save_graph(tmp_path):
    graph = load_kb_triples(KB_FILE)
    assert graph.number_of_edges() == 12
    assert graph.has_edge(DBR + "Melinda_Gates", DBR + "Dallas")

    size = save_graph(graph, tmp_path / "out" / "graph.pkl")
    assert size > 0

    loaded = load_graph(tmp_path / "out" / "graph.pkl")
    assert loaded.number_of_edges() == graph.number_of_edges()


def test_question_from_line():
    q = Question.from_line("Birthplace Bill Gates' wife?\tA|B", question_id=3)
    assert q.tokens == ["birthplace", "bill", "gates", "wife"]
    assert q.ground_truth_answers == ["A", "B"]
    assert q.question_id == 3

    with pytest.raises(ValueError):
        Question.from_line("no answers here", question_id=0)


def test_load_qa_dataset_limit():
    assert len(load_qa_dataset(QA_FILE)) == 4
    assert [q.question_id for q in load_qa_dataset(QA_FILE, limit=2)] == [0, 1]


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("workers", [1, 3])
def test_evaluator_metrics(selector, workers, tmp_path):
    save_path = tmp_path / "results" / "partial.json"
    evaluator = Evaluator(selector, "hashmap_test", max_workers=workers, incremental_save_path=str(save_path))

    evaluation = evaluator.evaluate(load_qa_dataset(QA_FILE), verbose=False)
    metrics = evaluation["metrics"]

    assert metrics["total_questions"] == 4
    assert metrics["correct_answers"] == 3
    assert metrics["accuracy"] == 0.75
    assert metrics["success_rate"] == 0.75
    assert [r.question_id for r in evaluation["results"]] == [0, 1, 2, 3]

    saved = json.loads(save_path.read_text())
    assert saved["status"] == "in_progress"
    assert len(saved["results"]) == 4

    output_path = tmp_path / "final.json"
    evaluator.save_results(evaluation, str(output_path))
    final = json.loads(output_path.read_text())
    assert final["status"] == "completed"
    assert final["results"][0]["predicted_answers"] == [DBR + "Dallas"]


def test_evaluator_empty_dataset(selector):
    evaluation = Evaluator(selector, "empty").evaluate([], verbose=False)
    assert evaluation["metrics"] == {}
